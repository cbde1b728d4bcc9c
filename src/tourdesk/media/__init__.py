"""Public asset URLs and the hosted image proxy."""
