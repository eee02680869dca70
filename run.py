import uvicorn

from utils.env_config import get_env_config

if __name__ == "__main__":
    config = get_env_config()
    uvicorn.run("app.main:app", host=config.host, port=config.port, reload=True)
