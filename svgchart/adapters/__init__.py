from .normalize import normalize_frame, normalize_pairs, normalize_time_series, normalize_values, normalize_xy

__all__ = ["normalize_frame", "normalize_pairs", "normalize_time_series", "normalize_values", "normalize_xy"]
