from datetime import timedelta

from flask import Blueprint, jsonify, current_app

from models import InvalidEventError
from routes.helpers import (
    get_now,
    get_optional_timestamp,
    get_payload,
    get_timezone,
    load_events,
    load_outcomes,
)
from services.craving_service import (
    compute_analytics,
    get_intensity_trend_direction,
    get_mood_correlation,
)
from services.effectiveness_service import (
    compute_method_effectiveness,
    get_most_effective_method,
    get_overall_success_rate,
    get_previously_successful_methods,
    get_progress_over_time,
    get_success_rate_by_time_of_day,
    rank_methods,
)
from services.insights_service import get_all_insights
from services.log_filter_service import events_in_range, outcomes_of
from services.streak_service import compute_logging_streak, compute_streaks


analytics_bp = Blueprint('analytics', __name__)


@analytics_bp.route('/analytics', methods=['POST'])
def get_craving_analytics():
    """Descriptive analytics for the events in the request, optionally ranged."""
    try:
        data = get_payload()
        events = load_events(data)
        user_timezone = get_timezone(data)

        start = get_optional_timestamp(data, 'start')
        end = get_optional_timestamp(data, 'end')
        if start is None and data.get('days') is not None:
            try:
                days = int(data['days'])
            except (TypeError, ValueError):
                raise InvalidEventError("'days' must be an integer.", 'days')
            days = max(1, min(365, days))  # Between 1 and 365 days
            start = get_now(data) - timedelta(days=days)

        events = events_in_range(events, start, end)
        analytics = compute_analytics(events, user_timezone=user_timezone)
        result = analytics.to_dict()
        result['trend_direction'] = get_intensity_trend_direction(events, user_timezone)
        result['mood_correlation'] = get_mood_correlation(events)
        return jsonify(result)

    except InvalidEventError:
        raise
    except Exception as e:
        current_app.logger.error(f'Craving analytics error: {e}')
        return jsonify(error="Failed to compute analytics."), 500


@analytics_bp.route('/streaks', methods=['POST'])
def get_streaks():
    """Intervention streaks plus the days-in-a-row logging streak."""
    try:
        data = get_payload()
        user_timezone = get_timezone(data)
        now = get_now(data)
        outcomes = load_outcomes(data)

        result = compute_streaks(outcomes, now, user_timezone).to_dict()
        if 'events' in data:
            result['logging'] = compute_logging_streak(load_events(data), now, user_timezone).to_dict()
        return jsonify(result)

    except InvalidEventError:
        raise
    except Exception as e:
        current_app.logger.error(f'Streak computation error: {e}')
        return jsonify(error="Failed to compute streaks."), 500


@analytics_bp.route('/effectiveness', methods=['POST'])
def get_method_effectiveness():
    """Per-method and per-method/time-of-day effectiveness tables."""
    try:
        data = get_payload()
        user_timezone = get_timezone(data)
        outcomes = load_outcomes(data)

        result = compute_method_effectiveness(outcomes, user_timezone).to_dict()
        result['ranking'] = [
            dict(method=method, **stats.to_dict())
            for method, stats in rank_methods(outcomes, user_timezone)
        ]
        result['most_effective_method'] = get_most_effective_method(outcomes)
        result['progress_over_time'] = get_progress_over_time(outcomes)
        return jsonify(result)

    except InvalidEventError:
        raise
    except Exception as e:
        current_app.logger.error(f'Method effectiveness error: {e}')
        return jsonify(error="Failed to compute method effectiveness."), 500


@analytics_bp.route('/insights', methods=['POST'])
def get_insights():
    """Weekly pattern, spacing and per-trigger insights."""
    try:
        data = get_payload()
        events = load_events(data)
        user_timezone = get_timezone(data)

        result = get_all_insights(events, user_timezone)
        result['overall_success_rate'] = get_overall_success_rate(events)
        result['success_rate_by_time_of_day'] = get_success_rate_by_time_of_day(events, user_timezone)
        result['interventions_logged'] = len(outcomes_of(events))
        if data.get('trigger'):
            result['previously_successful_methods'] = get_previously_successful_methods(events, data['trigger'])
        return jsonify(result)

    except InvalidEventError:
        raise
    except Exception as e:
        current_app.logger.error(f'Insights error: {e}')
        return jsonify(error="Failed to compute insights."), 500
