from campus_api.api.main import app

if __name__ == "__main__":
    import logging

    import uvicorn

    from campus_api.core.settings import Settings

    settings = Settings.from_env()
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    uvicorn.run(app, host=settings.host, port=settings.port)
