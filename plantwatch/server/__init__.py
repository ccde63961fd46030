from .entrypoint import create_app

app = create_app()
