# Controllers package initialization
# Flask blueprints exposing the services as a JSON API.
