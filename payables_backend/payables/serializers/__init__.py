from .debt import DebtReadSerializer
from .order import OrderReadSerializer
from .payment import PaymentReadSerializer
from .report import DashboardStatsSerializer, SupplierReportSerializer
from .supplier import SupplierReadSerializer, SupplierSummarySerializer

__all__ = [
    "SupplierReadSerializer",
    "SupplierSummarySerializer",
    "OrderReadSerializer",
    "DebtReadSerializer",
    "PaymentReadSerializer",
    "DashboardStatsSerializer",
    "SupplierReportSerializer",
]
