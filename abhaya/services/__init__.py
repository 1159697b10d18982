"""
Services layer - business logic goes here, not in routes.

- risk_zones: pure clustering of incident reports into risk zones
- incident_service / alert_service: Firestore reads and writes
- dashboard_service: render-ready payload for the authority map
- geocoding: location search for the report form
"""
