"""
Predictions Route
"""
from flask import Blueprint, jsonify, current_app

from models import InvalidEventError, TimeBucket
from models.validation import coerce_int
from routes.helpers import get_now, get_payload, get_timezone, load_events
from services.effectiveness_service import get_previously_successful_methods
from services.predictive_service import (
    predict_craving_times,
    predict_risk_windows,
    predict_success_probability,
    recommend_best_method_detail,
)
from services.timezone_service import get_time_bucket

predictions_bp = Blueprint('predictions', __name__)


def _get_bucket(data, user_timezone):
    """Requested time of day, or the one the current instant falls in."""
    if data.get('time_of_day'):
        try:
            return TimeBucket.from_label(data['time_of_day'])
        except ValueError as e:
            raise InvalidEventError(str(e), 'time_of_day')
    return get_time_bucket(get_now(data), user_timezone)


@predictions_bp.route('/risk-windows', methods=['POST'])
def risk_windows():
    """Risk level per time of day"""
    try:
        data = get_payload()
        events = load_events(data)
        windows = predict_risk_windows(events, get_timezone(data))
        return jsonify([w.to_dict() for w in windows])

    except InvalidEventError:
        raise
    except Exception as e:
        current_app.logger.error(f'Risk window error: {e}')
        return jsonify(error="Failed to predict risk windows."), 500


@predictions_bp.route('/craving-times', methods=['POST'])
def craving_times():
    """Clock hours most likely to bring a craving, with a technique for each"""
    try:
        data = get_payload()
        events = load_events(data)
        predictions = predict_craving_times(events, get_timezone(data))
        return jsonify([p.to_dict() for p in predictions])

    except InvalidEventError:
        raise
    except Exception as e:
        current_app.logger.error(f'Craving time prediction error: {e}')
        return jsonify(error="Failed to predict craving times."), 500


@predictions_bp.route('/success-probability', methods=['POST'])
def success_probability():
    """Chance that an intervention works for this trigger and intensity now"""
    try:
        data = get_payload()
        events = load_events(data)
        user_timezone = get_timezone(data)

        trigger = data.get('trigger')
        if not trigger:
            raise InvalidEventError("'trigger' is required.", 'trigger')
        intensity = coerce_int(data.get('intensity'), 'intensity', required=True)
        if not (1 <= intensity <= 10):
            raise InvalidEventError("Intensity (1-10) is required.", 'intensity')
        bucket = _get_bucket(data, user_timezone)

        probability = predict_success_probability(events, trigger, intensity, bucket, user_timezone)
        return jsonify({
            'trigger': trigger,
            'intensity': intensity,
            'time_of_day': bucket.value,
            'success_probability': probability,
            'previously_successful_methods': get_previously_successful_methods(events, trigger),
        })

    except InvalidEventError:
        raise
    except Exception as e:
        current_app.logger.error(f'Success probability error: {e}')
        return jsonify(error="Failed to predict success probability."), 500


@predictions_bp.route('/best-method', methods=['POST'])
def best_method():
    """Method to try first for a time of day; null without enough history"""
    try:
        data = get_payload()
        events = load_events(data)
        user_timezone = get_timezone(data)
        bucket = _get_bucket(data, user_timezone)

        recommendation = recommend_best_method_detail(events, bucket, user_timezone)
        return jsonify({
            'time_of_day': bucket.value,
            'method': recommendation.method if recommendation else None,
            'recommendation': recommendation.to_dict() if recommendation else None,
        })

    except InvalidEventError:
        raise
    except Exception as e:
        current_app.logger.error(f'Best method error: {e}')
        return jsonify(error="Failed to recommend a method."), 500
