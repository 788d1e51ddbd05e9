"""SmartSchool Sentinel - school operations dashboard."""
