import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from blog_backend.core import config
from blog_backend.core.errors import register_exception_handlers
from blog_backend.core.logging import configure_logging
from blog_backend.database import engine, ensure_user_schema
from blog_backend.models import user
from blog_backend.routes import auth_routes, user_routes

configure_logging(config.APP_ENV)

app = FastAPI()

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_origin_regex=config.CORS_ORIGIN_REGEX,
    allow_credentials=True,
    allow_methods=['GET', 'POST', 'PUT', 'DELETE', 'OPTIONS'],
    allow_headers=['Content-Type', 'Authorization', 'x-requested-with'],
)

register_exception_handlers(app)

logger = logging.getLogger(__name__)


@app.on_event('startup')
def initialize_database() -> None:
    config.validate_runtime_config()
    logger.info('Server running in %s mode', config.APP_ENV)
    try:
        user.Base.metadata.create_all(bind=engine)
        ensure_user_schema()
        logger.info('Connected to database')
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL and database credentials.')


@app.get('/')
def root():
    return {'status': 'Blog API Running'}


@app.get('/api/test')
def api_test():
    return {'message': 'API is working!'}


app.include_router(auth_routes.router, prefix='/api/auth')
app.include_router(user_routes.router, prefix='/api/user')
