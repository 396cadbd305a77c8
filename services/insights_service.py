import pandas as pd

from services.timezone_service import convert_utc_to_user_time

DAY_ORDER = ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday']


def get_cravings_df(events, user_timezone: str):
    rows = [
        (e.timestamp, e.intensity, e.trigger, e.duration_minutes, e.resisted)
        for e in events
    ]
    if not rows:
        return pd.DataFrame()

    df = pd.DataFrame(rows, columns=['utc_time', 'intensity', 'trigger', 'duration_minutes', 'resisted'])
    df['user_time'] = df['utc_time'].apply(lambda x: convert_utc_to_user_time(user_timezone, x)[0].replace(tzinfo=None))
    df['user_time'] = pd.to_datetime(df['user_time'])
    df['duration_minutes'] = pd.to_numeric(df['duration_minutes'], errors='coerce')
    return df.sort_values('user_time', kind='stable').reset_index(drop=True)


def get_cravings_by_day_of_week(events, user_timezone: str = 'UTC'):
    df = get_cravings_df(events, user_timezone)
    if df.empty:
        return {}

    df['day_of_week'] = df['user_time'].dt.day_name()
    counts = df.groupby('day_of_week')['intensity'].count().reindex(DAY_ORDER).fillna(0)
    return {day: int(count) for day, count in counts.items()}


def get_average_time_between_cravings(events, user_timezone: str = 'UTC'):
    df = get_cravings_df(events, user_timezone)
    if len(df) < 2:
        return None

    avg_diff = df['user_time'].diff().dt.total_seconds().mean()
    if pd.isna(avg_diff):
        return None

    # Format into a human-readable string
    hours, remainder = divmod(avg_diff, 3600)
    minutes, _ = divmod(remainder, 60)

    return f"{int(hours)}h {int(minutes)}m"


def get_trigger_analysis(events, user_timezone: str = 'UTC'):
    """Count, average intensity and average duration per trigger."""
    df = get_cravings_df(events, user_timezone)
    if df.empty:
        return {}

    grouped = df.groupby('trigger', sort=False).agg(
        count=('intensity', 'size'),
        avg_intensity=('intensity', 'mean'),
        avg_duration=('duration_minutes', 'mean'),
    ).sort_values('count', ascending=False, kind='stable')

    return {
        trigger: {
            'count': int(row['count']),
            'avg_intensity': round(float(row['avg_intensity']), 1),
            'avg_duration': round(float(row['avg_duration']), 1) if pd.notna(row['avg_duration']) else None,
        }
        for trigger, row in grouped.iterrows()
    }


def get_all_insights(events, user_timezone: str = 'UTC'):
    return {
        'cravings_by_day_of_week': get_cravings_by_day_of_week(events, user_timezone),
        'average_time_between_cravings': get_average_time_between_cravings(events, user_timezone),
        'trigger_analysis': get_trigger_analysis(events, user_timezone),
    }
