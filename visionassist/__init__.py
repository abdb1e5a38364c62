"""VisionAssist backend: face registry, recognition pipeline and navigation."""
