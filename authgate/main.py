from authgate.core.app_factory import create_app

# Deployments inject a database-backed credential store through create_app().
app = create_app()
