"""
Grid search tests for the random forest tuner.

Run with: pytest tests/test_tune_grid.py -v
"""
import itertools
from types import SimpleNamespace

import pytest

from breast_cancer_eval.exceptions import TrainingError
from breast_cancer_eval.training_pipeline import tune_grid
from breast_cancer_eval.training_pipeline.train_models import oob_error, train_random_forest
from breast_cancer_eval.training_pipeline.tune_grid import build_grid, run_grid_search

MAX_FEATURES = [1, 2]
MIN_SAMPLES_LEAF = [1, 3]
MAX_SAMPLES = [20, 40]


class TestBuildGrid:
    """Test suite for grid expansion order."""

    def test_grid_order(self):
        """Test that max_features is the outer loop and max_samples the inner."""
        grid = build_grid([3, 5], [1, 2], [100, 200])

        assert len(grid) == 8
        assert grid[0] == {"max_features": 3, "min_samples_leaf": 1, "max_samples": 100}
        assert grid[1] == {"max_features": 3, "min_samples_leaf": 1, "max_samples": 200}
        assert grid[2] == {"max_features": 3, "min_samples_leaf": 2, "max_samples": 100}
        assert grid[4] == {"max_features": 5, "min_samples_leaf": 1, "max_samples": 100}


class TestRunGridSearch:
    """Test suite for OOB-driven grid search."""

    def test_best_params_in_product(self, separable_data):
        """Test that the winner is one of the candidate combinations."""
        X, y = separable_data

        best_params, best_error, results = run_grid_search(
            X, y, MAX_FEATURES, MIN_SAMPLES_LEAF, MAX_SAMPLES,
            random_state=0, n_estimators=25
        )

        product = set(itertools.product(MAX_FEATURES, MIN_SAMPLES_LEAF, MAX_SAMPLES))
        chosen = (best_params["max_features"], best_params["min_samples_leaf"], best_params["max_samples"])
        assert chosen in product, "Winner must come from the Cartesian product"
        assert best_error == results["oob_error"].min()

    def test_error_matches_recomputation(self, separable_data):
        """Test that retraining the winner reproduces its reported OOB error."""
        X, y = separable_data

        best_params, best_error, _ = run_grid_search(
            X, y, MAX_FEATURES, MIN_SAMPLES_LEAF, MAX_SAMPLES,
            random_state=5, n_estimators=25
        )
        model = train_random_forest(X, y, best_params, random_state=5, n_estimators=25)

        assert oob_error(model) == pytest.approx(best_error)

    def test_results_cover_grid_in_order(self, separable_data):
        """Test that every grid point is reported, in iteration order."""
        X, y = separable_data

        _, _, results = run_grid_search(
            X, y, MAX_FEATURES, MIN_SAMPLES_LEAF, MAX_SAMPLES,
            random_state=0, n_estimators=10
        )

        expected = list(itertools.product(MAX_FEATURES, MIN_SAMPLES_LEAF, MAX_SAMPLES))
        actual = list(results[["max_features", "min_samples_leaf", "max_samples"]].itertuples(index=False, name=None))
        assert actual == expected
        assert results["oob_error"].between(0, 1).all()

    def test_ties_resolve_to_first_grid_point(self, separable_data, monkeypatch):
        """Test that equal errors keep the earliest combination in grid order."""
        X, y = separable_data
        errors = {combo: 0.10 for combo in itertools.product(MAX_FEATURES, MIN_SAMPLES_LEAF, MAX_SAMPLES)}
        errors[(1, 3, 40)] = 0.05
        errors[(2, 1, 20)] = 0.05
        seen = []

        def fake_train(X_train, y_train, params, random_state=None, n_estimators=None):
            combo = (params["max_features"], params["min_samples_leaf"], params["max_samples"])
            seen.append((combo, random_state))
            return SimpleNamespace(oob_score_=1.0 - errors[combo])

        monkeypatch.setattr(tune_grid, "train_random_forest", fake_train)

        best_params, best_error, _ = run_grid_search(
            X, y, MAX_FEATURES, MIN_SAMPLES_LEAF, MAX_SAMPLES, random_state=11
        )

        assert best_params == {"max_features": 1, "min_samples_leaf": 3, "max_samples": 40}
        assert best_error == pytest.approx(0.05)
        assert {seed for _, seed in seen} == {11}, "Every grid point must use the same seed"

    def test_max_samples_larger_than_training_raises(self, separable_data):
        """Test that bootstrap sizes beyond the partition are rejected up front."""
        X, y = separable_data

        with pytest.raises(ValueError, match="max_samples"):
            run_grid_search(X, y, [1], [1], [len(X) + 1])

    def test_max_features_larger_than_feature_count_raises(self, separable_data):
        """Test that feature counts beyond the data are rejected up front."""
        X, y = separable_data

        with pytest.raises(ValueError, match="max_features"):
            run_grid_search(X, y, [X.shape[1] + 1], [1], [10])

    @pytest.mark.parametrize("grid", [
        ([], [1], [10]),
        ([1], [0], [10]),
        ([1], [1], [-5]),
    ])
    def test_invalid_candidates_raise(self, separable_data, grid):
        """Test that empty or non-positive candidate lists are rejected."""
        X, y = separable_data

        with pytest.raises(ValueError):
            run_grid_search(X, y, *grid)

    def test_single_class_raises(self, separable_data):
        """Test that grid search refuses a single-class partition."""
        X, y = separable_data
        mask = y == "M"

        with pytest.raises(TrainingError):
            run_grid_search(X[mask], y[mask], [1], [1], [10])


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
