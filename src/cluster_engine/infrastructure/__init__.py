from .records import cluster_from_record, cluster_to_record, parse_centroid

__all__ = ["cluster_from_record", "cluster_to_record", "parse_centroid"]
