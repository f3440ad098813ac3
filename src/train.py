"""
Train/test splitting and logistic regression training for flight delay analysis
"""
import logging
import time

import numpy as np
import pandas as pd
from sklearn.base import BaseEstimator, TransformerMixin
from sklearn.compose import ColumnTransformer, make_column_selector
from sklearn.linear_model import LogisticRegression
from sklearn.model_selection import train_test_split
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import OneHotEncoder, StandardScaler

from config import MODEL_CONFIG, RANDOM_SEED, TRAIN_PROPORTION, TARGET_COLUMN

logger = logging.getLogger(__name__)


def split_train_test(df, train_proportion=TRAIN_PROPORTION, seed=RANDOM_SEED):
    """Seeded random partition of ``df`` into (train, test)

    The training partition holds ``floor(train_proportion * len(df))`` rows
    drawn without replacement; the remainder is the test partition.
    """
    if not 0 < train_proportion < 1:
        raise ValueError(f"train_proportion must be between 0 and 1, got {train_proportion}")
    if len(df) < 2:
        raise ValueError(f"Need at least 2 rows to split, got {len(df)}")

    train_df, test_df = train_test_split(
        df, train_size=train_proportion, random_state=seed, shuffle=True
    )

    logger.info(f"Training set size: {len(train_df):,}")
    logger.info(f"Testing set size: {len(test_df):,}")

    return train_df, test_df


class ZeroVarianceFilter(BaseEstimator, TransformerMixin):
    """Drop columns that hold a single distinct value in the training data"""

    def fit(self, X, y=None):
        X = pd.DataFrame(X)
        n_unique = X.nunique(dropna=False)
        self.dropped_columns_ = n_unique[n_unique <= 1].index.tolist()
        self.kept_columns_ = [col for col in X.columns if col not in self.dropped_columns_]
        if self.dropped_columns_:
            logger.info(f"Removing zero-variance predictors: {self.dropped_columns_}")
        return self

    def transform(self, X):
        return pd.DataFrame(X)[self.kept_columns_]

    def get_feature_names_out(self, input_features=None):
        return np.asarray(self.kept_columns_, dtype=object)


class ModelTrainer:
    """Fits the preprocessing + logistic regression pipeline"""

    def __init__(self, model_params=None):
        self.model_params = model_params or MODEL_CONFIG['logistic_regression']
        self.pipeline = None
        self.training_time = None

    def build_pipeline(self):
        """Zero-variance filter, one-hot/standardize, then logistic regression"""
        preprocessor = ColumnTransformer(
            transformers=[
                ('categorical', OneHotEncoder(drop='first', handle_unknown='ignore'),
                 make_column_selector(dtype_exclude=np.number)),
                ('numeric', StandardScaler(),
                 make_column_selector(dtype_include=np.number)),
            ],
            sparse_threshold=0,
            verbose_feature_names_out=False,
        )

        return Pipeline([
            ('zero_variance', ZeroVarianceFilter()),
            ('preprocessor', preprocessor),
            ('classifier', LogisticRegression(**self.model_params)),
        ])

    @staticmethod
    def split_features_target(df):
        X = df.drop(columns=[TARGET_COLUMN])
        y = df[TARGET_COLUMN].astype(str)
        return X, y

    def fit(self, train_df):
        """Fit the pipeline on the training partition only"""
        X_train, y_train = self.split_features_target(train_df)

        classes = y_train.unique()
        if len(classes) < 2:
            raise ValueError(
                f"Training data must contain two label classes, found {sorted(classes)}"
            )

        pipeline = self.build_pipeline()
        start_time = time.time()

        # Fit preprocessing first so an empty design matrix is reported clearly
        preprocessing = pipeline[:-1]
        X_transformed = preprocessing.fit_transform(X_train)
        if X_transformed.shape[1] == 0:
            raise ValueError("No predictor columns remain after preprocessing")

        pipeline.named_steps['classifier'].fit(X_transformed, y_train)
        self.training_time = time.time() - start_time
        self.pipeline = pipeline

        logger.info(
            f"Model training completed on {len(train_df):,} rows with "
            f"{X_transformed.shape[1]} features in {self.training_time:.2f}s"
        )
        return pipeline

    def _check_fitted(self):
        if self.pipeline is None:
            raise ValueError("Model has not been trained yet")

    @property
    def scaler(self):
        self._check_fitted()
        return self.pipeline.named_steps['preprocessor'].named_transformers_['numeric']

    def get_feature_names(self):
        self._check_fitted()
        return list(self.pipeline.named_steps['preprocessor'].get_feature_names_out())

    def get_feature_importance(self):
        """Absolute standardized coefficients, largest first"""
        self._check_fitted()
        coefficients = self.pipeline.named_steps['classifier'].coef_[0]

        feature_importance_df = pd.DataFrame({
            'feature': self.get_feature_names(),
            'importance': np.abs(coefficients),
        }).sort_values('importance', ascending=False).reset_index(drop=True)

        return feature_importance_df
