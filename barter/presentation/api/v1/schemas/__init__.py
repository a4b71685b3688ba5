"""Request / response schemas of API v1."""
