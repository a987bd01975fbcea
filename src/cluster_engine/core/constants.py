"""Numeric defaults for cluster policy.

These values are shared with deployments that were tuned against them; change
them through ``ClusterConfig`` overrides rather than editing them here.
"""

# Structural limits (not overridable per cluster)
MIN_DIMENSION = 32
MAX_DIMENSION = 512
MAX_NAME_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 500
MAX_CENTROID_MAGNITUDE = 10.0
DOMINANT_TOPIC_COUNT = 3

# Size bounds
MIN_SIZE = 3
MAX_SIZE = 1000
OPTIMAL_MIN_SIZE = 10
OPTIMAL_MAX_SIZE = 500

# Scheduling (hours)
RECOMPUTE_INTERVAL_HOURS = 24
STALE_THRESHOLD_HOURS = 72

# Lifecycle policy
QUALITY_THRESHOLD = 0.5
AUTO_ARCHIVE = True
AUTO_MERGE = False
MERGE_THRESHOLD = 0.85
MAX_TOPICS = 20

# Quality score weights (must sum to 1.0)
COHERENCE_WEIGHT = 0.35
DENSITY_WEIGHT = 0.25
SIZE_WEIGHT = 0.20
ENGAGEMENT_WEIGHT = 0.20
SIZE_SCORE_MIN = 0.2
ENGAGEMENT_CAP = 1.0

# Quality level lower bounds
MEDIUM_QUALITY_THRESHOLD = 0.4
HIGH_QUALITY_THRESHOLD = 0.6
EXCELLENT_QUALITY_THRESHOLD = 0.8

# Density is interactions per member relative to this many interactions
INTERACTIONS_PER_MEMBER_FOR_FULL_DENSITY = 100

# Health analysis
LOW_COHERENCE_THRESHOLD = 0.4
LOW_DENSITY_THRESHOLD = 0.2
OVERSIZED_THRESHOLD = 800
UNDERSIZED_THRESHOLD = 5
MERGE_RECOMMENDATION_CONFIDENCE = 0.7
SPLIT_RECOMMENDATION_CONFIDENCE = 0.6
RECOMPUTE_RECOMMENDATION_CONFIDENCE = 0.5
STALE_RECOMPUTE_CONFIDENCE_BONUS = 0.1
MAX_ISSUES_PER_ANALYSIS = 10
MAX_RECOMMENDATIONS_PER_ANALYSIS = 5
DIVERSITY_SCORE_FLOOR = 0.2
STABILITY_MATURITY_DAYS = 30

# Assignment policy
AUTO_ASSIGN_THRESHOLD = 0.8
MANUAL_REVIEW_THRESHOLD = 0.6
MIN_MATCH_SIMILARITY = 0.5
MAX_MATCH_RESULTS = 5
