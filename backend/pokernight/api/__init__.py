from .players import router as players_router
from .report import router as report_router
from .seating_charts import router as seating_charts_router
from .sessions import router as sessions_router

__all__ = ["players_router", "sessions_router", "seating_charts_router", "report_router"]
