from subfeed.core.use_cases.reconcile import FeedKeys, FeedReconciler, reconcile_sets

__all__ = ["FeedKeys", "FeedReconciler", "reconcile_sets"]
