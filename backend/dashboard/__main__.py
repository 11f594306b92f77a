import uvicorn

from .config import HOST, PORT

uvicorn.run("dashboard.main:app", host=HOST, port=PORT)
