# Blueprint registration module
from .analytics import analytics_bp
from .predictions import predictions_bp
from .sessions import sessions_bp

__all__ = [
    'analytics_bp',
    'predictions_bp',
    'sessions_bp',
]
