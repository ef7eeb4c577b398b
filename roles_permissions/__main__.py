from roles_permissions.main import app  # pragma: no cover

# Allows `python -m roles_permissions` to serve the API with uvicorn.
if __name__ == "__main__":  # pragma: no cover
    import uvicorn

    from roles_permissions.core.config import get_settings

    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port)
