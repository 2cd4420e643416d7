from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ClusterInsight:
    description: str
    average_comb_fe: float
    recommendation: str


CLUSTER_INSIGHTS: dict[int, ClusterInsight] = {
    0: ClusterInsight(
        description="Orange, High fuel efficiency vehicles.",
        average_comb_fe=30.0,
        recommendation="Keep tires inflated and perform regular maintenance.",
    ),
    1: ClusterInsight(
        description="Blue, Moderate fuel efficiency vehicles.",
        average_comb_fe=20.0,
        recommendation="Consider eco-friendly driving habits.",
    ),
    2: ClusterInsight(
        description="Green, Low fuel efficiency vehicles.",
        average_comb_fe=45.0,
        recommendation="Plan short trips efficiently.",
    ),
}


def insight_for(cluster_id: int) -> ClusterInsight | None:
    return CLUSTER_INSIGHTS.get(int(cluster_id))
