from .client import DEFAULT_BASE_URL, FetchResult, ServiceClient, ServiceError
from .inputs import ClusterInputs, PredictionInputs
from .insights import CLUSTER_INSIGHTS, ClusterInsight, insight_for

__all__ = [
    "CLUSTER_INSIGHTS",
    "ClusterInputs",
    "ClusterInsight",
    "DEFAULT_BASE_URL",
    "FetchResult",
    "PredictionInputs",
    "ServiceClient",
    "ServiceError",
    "insight_for",
]
