"""HTTP interface for the regime allocation pipeline."""
