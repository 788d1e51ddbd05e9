"""Web service: JSON API, server actions and dashboard pages."""
