"""
API endpoint tests for the Craving Insights service.
"""
import json

import pytest

from tests.conftest import event_record

NOW = '2024-03-11T15:00:00Z'


def attempt_record(index, method, successful, timestamp, trigger='stress', intensity=6):
    return event_record(
        id=f'evt-{index}',
        timestamp=timestamp,
        trigger=trigger,
        intensity=intensity,
        resisted=successful,
        intervention_outcome={
            'intervention_type': method,
            'successful': successful,
            'intensity_before': intensity,
            'intensity_after': intensity - 3 if successful else intensity,
        },
    )


@pytest.fixture
def history():
    """Three afternoon breathing attempts (two worked), one evening timer attempt."""
    return [
        attempt_record(1, 'breathing', True, '2024-03-08T13:00:00Z'),
        attempt_record(2, 'breathing', False, '2024-03-09T14:00:00Z'),
        attempt_record(3, 'breathing', True, '2024-03-10T15:00:00Z'),
        attempt_record(4, 'timer', True, '2024-03-10T19:00:00Z', trigger='boredom', intensity=4),
        event_record(id='evt-5', timestamp='2024-03-11T08:00:00Z', trigger='Boredom', intensity=3, resisted=False),
    ]


def post(client, url, payload):
    return client.post(url, data=json.dumps(payload), content_type='application/json')


class TestAnalyticsEndpoints:
    """Descriptive analytics over the posted snapshot."""

    def test_analytics(self, client, history):
        response = post(client, '/api/analytics', {'events': history})
        assert response.status_code == 200
        data = response.get_json()
        assert data['total_cravings'] == 5
        assert data['resisted_cravings'] == 3
        assert data['resistance_rate'] == pytest.approx(60.0)
        assert data['common_triggers'][0] == {'trigger': 'stress', 'count': 3}
        assert [b['time_of_day'] for b in data['triggers_by_time_of_day']] == \
            ['morning', 'afternoon', 'evening', 'night']
        assert [p['date'] for p in data['intensity_trend']] == \
            ['2024-03-08', '2024-03-09', '2024-03-10', '2024-03-11']
        assert data['predictions'][0]['time_of_day'] == 'afternoon'
        assert 'trend_direction' in data
        assert 'mood_correlation' in data

    def test_analytics_days_window(self, client, history):
        response = post(client, '/api/analytics', {'events': history, 'days': 1, 'now': NOW})
        data = response.get_json()
        assert data['total_cravings'] == 3

    def test_ranged_analytics_uses_one_data_set(self, client):
        events = [
            event_record(id='old', timestamp='2024-01-01T09:00:00Z', intensity=10, mood_before=2),
            event_record(id='new', timestamp='2024-03-11T09:00:00Z', intensity=2, mood_before=8),
        ]
        data = post(client, '/api/analytics', {'events': events, 'start': '2024-03-01T00:00:00Z'}).get_json()
        assert data['total_cravings'] == 1
        assert data['mood_correlation']['avg_intensity'] == 2.0
        assert data['mood_correlation']['avg_mood_before'] == 8.0
        assert data['trend_direction']['current_avg'] == 2.0

    def test_analytics_empty(self, client):
        response = post(client, '/api/analytics', {'events': []})
        data = response.get_json()
        assert data['total_cravings'] == 0
        assert data['resistance_rate'] == 0
        assert data['common_triggers'] == []
        assert data['predictions'] == []

    def test_streaks(self, client, history):
        response = post(client, '/api/streaks', {'events': history, 'now': NOW})
        assert response.status_code == 200
        data = response.get_json()
        assert data['current'] == 2
        assert data['longest'] == 2
        assert data['last_date'] == '2024-03-10'
        assert data['logging']['current_days'] == 4

    def test_streaks_from_outcomes(self, client):
        outcomes = [
            {'intervention_type': 'timer', 'successful': True, 'timestamp': '2024-03-11T09:00:00Z'},
            {'intervention_type': 'timer', 'successful': False, 'timestamp': '2024-03-11T10:00:00Z'},
        ]
        data = post(client, '/api/streaks', {'outcomes': outcomes, 'now': NOW}).get_json()
        assert data['current'] == 0
        assert data['longest'] == 1
        assert 'logging' not in data

    def test_effectiveness(self, client, history):
        response = post(client, '/api/effectiveness', {'events': history})
        assert response.status_code == 200
        data = response.get_json()
        breathing = data['overall']['breathing']
        assert breathing['total_used'] == 3
        assert breathing['success_rate'] == pytest.approx(200 / 3)
        assert breathing['eligible'] is True
        assert data['by_time_of_day']['timer']['evening']['total_used'] == 1
        assert data['ranking'][0]['method'] == 'timer'
        assert data['most_effective_method']['name'] == 'breathing'
        assert len(data['progress_over_time']) == 4

    def test_insights(self, client, history):
        response = post(client, '/api/insights', {'events': history, 'trigger': 'stress'})
        assert response.status_code == 200
        data = response.get_json()
        assert data['interventions_logged'] == 4
        assert data['overall_success_rate'] == pytest.approx(75.0)
        assert data['previously_successful_methods'] == ['breathing']
        assert data['trigger_analysis']['stress']['count'] == 3


class TestPredictionEndpoints:

    def test_risk_windows(self, client, history):
        response = post(client, '/predictions/risk-windows', {'events': history})
        assert response.status_code == 200
        windows = response.get_json()
        assert windows[0]['time_of_day'] == 'afternoon'
        assert windows[0]['risk_level'] == 'high'
        assert windows[0]['recommended_action'] == 'Try a 5-minute breathing exercise'
        assert windows[-1]['time_of_day'] == 'morning'
        assert windows[-1]['risk_level'] == 'medium'

    def test_craving_times(self, client, history):
        response = post(client, '/predictions/craving-times', {'events': history})
        assert response.status_code == 200
        predictions = response.get_json()
        assert [p['hour'] for p in predictions] == [8, 13, 14]
        assert predictions[0]['risk_level'] == 'low'
        assert predictions[0]['risk_percentage'] == 20
        assert predictions[0]['recommended_intervention'] == 'breathing'
        assert predictions[1]['recommended_intervention'] == 'breathing'

    def test_craving_times_needs_history(self, client, history):
        response = post(client, '/predictions/craving-times', {'events': history[:4]})
        assert response.get_json() == []

    def test_success_probability(self, client, history):
        response = post(client, '/predictions/success-probability', {
            'events': history,
            'trigger': 'Stress',
            'intensity': 6,
            'time_of_day': 'afternoon',
        })
        assert response.status_code == 200
        data = response.get_json()
        assert data['success_probability'] == 67
        assert data['time_of_day'] == 'afternoon'

    def test_success_probability_without_history(self, client):
        response = post(client, '/predictions/success-probability',
                        {'events': [], 'trigger': 'stress', 'intensity': 5, 'now': NOW})
        data = response.get_json()
        assert data['success_probability'] == 50
        assert data['time_of_day'] == 'afternoon'

    @pytest.mark.parametrize('payload', [
        {'intensity': 5},
        {'trigger': 'stress'},
        {'trigger': 'stress', 'intensity': 11},
        {'trigger': 'stress', 'intensity': 5, 'time_of_day': 'dusk'},
    ])
    def test_success_probability_validation(self, client, payload):
        response = post(client, '/predictions/success-probability', payload)
        assert response.status_code == 400
        assert 'error' in response.get_json()

    def test_best_method(self, client, history):
        data = post(client, '/predictions/best-method',
                    {'events': history, 'time_of_day': 'afternoon'}).get_json()
        assert data['method'] == 'breathing'
        assert data['recommendation']['total_used'] == 3

    def test_best_method_without_enough_history(self, client, history):
        data = post(client, '/predictions/best-method',
                    {'events': history, 'time_of_day': 'evening'}).get_json()
        assert data['method'] is None
        assert data['recommendation'] is None


class TestSessionEndpoints:

    def test_session_lifecycle(self, client):
        response = post(client, '/sessions', {
            'trigger': 'Stress',
            'initial_intensity': 8,
            'intervention_type': 'breathing',
            'now': NOW,
        })
        assert response.status_code == 201
        session = response.get_json()
        assert session['state'] == 'running'
        assert session['elapsed_seconds'] == 0

        url = f"/sessions/{session['id']}"
        response = client.patch(f'{url}/intensity', data=json.dumps({'intensity': 4}),
                                content_type='application/json')
        assert response.get_json()['current_intensity'] == 4

        response = post(client, f'{url}/complete', {'successful': True, 'now': '2024-03-11T15:03:00Z'})
        assert response.status_code == 201
        outcome = response.get_json()
        assert outcome['successful'] is True
        assert outcome['intensity_reduction'] == 4
        assert outcome['duration_seconds'] == 180
        assert outcome['trigger'] == 'stress'

        assert client.get(url).status_code == 404

    def test_switch_method(self, client):
        session = post(client, '/sessions', {'trigger': 'boredom', 'initial_intensity': 5}).get_json()
        response = post(client, f"/sessions/{session['id']}/method", {'intervention_type': 'distraction'})
        assert response.get_json()['intervention_type'] == 'distract'

    def test_abandon_session(self, client):
        session = post(client, '/sessions', {'trigger': 'boredom', 'initial_intensity': 5}).get_json()
        assert client.delete(f"/sessions/{session['id']}").status_code == 200
        assert client.delete(f"/sessions/{session['id']}").status_code == 404

    def test_complete_requires_result(self, client):
        session = post(client, '/sessions', {'trigger': 'boredom', 'initial_intensity': 5}).get_json()
        response = post(client, f"/sessions/{session['id']}/complete", {})
        assert response.status_code == 400
        assert response.get_json()['field'] == 'successful'

    def test_invalid_initial_intensity(self, client):
        response = post(client, '/sessions', {'trigger': 'stress', 'initial_intensity': 0})
        assert response.status_code == 400

    def test_running_session_limit(self, client, app):
        for _ in range(app.config['MAX_RUNNING_SESSIONS']):
            post(client, '/sessions', {'trigger': 'stress', 'initial_intensity': 5})
        response = post(client, '/sessions', {'trigger': 'stress', 'initial_intensity': 5})
        assert response.status_code == 409

    def test_abandoned_sessions_expire(self, client, app):
        for _ in range(app.config['MAX_RUNNING_SESSIONS']):
            post(client, '/sessions', {'trigger': 'stress', 'initial_intensity': 5, 'now': NOW})

        response = post(client, '/sessions', {'trigger': 'stress', 'initial_intensity': 5,
                                               'now': '2024-03-11T15:10:00Z'})
        assert response.status_code == 409

        later = '2024-03-11T16:00:01Z'  # one hour and a second after the first batch
        response = post(client, '/sessions', {'trigger': 'stress', 'initial_intensity': 5, 'now': later})
        assert response.status_code == 201
        assert len(app.extensions['session_registry']) == 1


class TestRequestValidation:

    def test_malformed_event_names_field(self, client):
        response = post(client, '/api/analytics', {'events': [event_record(), event_record(timestamp='soon')]})
        assert response.status_code == 400
        data = response.get_json()
        assert data['field'] == 'timestamp'
        assert data['error'].startswith('Event 1')

    def test_unknown_timezone(self, client):
        response = post(client, '/api/analytics', {'events': [], 'timezone': 'Mars/Olympus'})
        assert response.status_code == 400
        assert response.get_json()['field'] == 'timezone'

    def test_too_many_events(self, client, app):
        events = [event_record(id=f'evt-{i}') for i in range(app.config['MAX_EVENTS_PER_REQUEST'] + 1)]
        response = post(client, '/api/analytics', {'events': events})
        assert response.status_code == 400

    def test_body_must_be_object(self, client):
        response = post(client, '/predictions/risk-windows', [1, 2, 3])
        assert response.status_code == 400

    def test_unknown_route(self, client):
        response = client.get('/api/nothing-here')
        assert response.status_code == 404
        assert response.get_json() == {'error': 'Not found.'}
