"""
Configuration settings for the Flight Delay Analysis project
"""

import numpy as np

# Labelling
LATE_THRESHOLD_MINUTES = 30

# Splitting
RANDOM_SEED = 123
TRAIN_PROPORTION = 0.75

# Model settings
MODEL_CONFIG = {
    'logistic_regression': {
        'C': np.inf,
        'max_iter': 1000,
    }
}

# Column definitions
FLIGHT_COLUMNS = [
    'year', 'month', 'day', 'dep_time', 'arr_delay', 'carrier', 'origin'
]

WEATHER_COLUMNS = [
    'year', 'month', 'day', 'origin', 'temp', 'precip', 'wind_speed'
]

JOIN_KEYS = ['year', 'month', 'day', 'origin']

CATEGORICAL_COLUMNS = ['carrier', 'origin']

TARGET_COLUMN = 'label'

MODEL_COLUMNS = [
    'year', 'month', 'day', 'hour', 'minute', 'carrier', 'origin',
    TARGET_COLUMN, 'temperature', 'precipitation', 'wind_speed'
]

# Reporting
HISTOGRAM_BINS = 30

MENU_TITLE = "*** Flight Delay Prediction Project ***"
EXIT_CHOICE = 11
