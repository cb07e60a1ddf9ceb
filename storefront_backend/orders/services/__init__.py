from .compensation import CompensationStack
from .order_store import OrderStore
from .order_workflow import OrderWithLines, OrderWorkflow, PricedLine, StockAdjustmentFailure

__all__ = [
    "CompensationStack",
    "OrderStore",
    "OrderWithLines",
    "OrderWorkflow",
    "PricedLine",
    "StockAdjustmentFailure",
]
