# institution_recommender/app.py
"""
Flask application factory.

create_app() wires a ModelRegistry into the /api routes. Pass a prebuilt
registry (tests, embedding); otherwise one is trained from the files under
DATA_DIR at startup. If that yields no models the app still serves, and the
data routes retry the load on demand until some dataset builds.
"""
from flask import Flask
from loguru import logger

from . import config
from .api import register_recommend
from .loader import load_datasets
from .logs import setup_logging
from .registry import ModelRegistry


def initialize_registry(data_dir=None, test_ratio=None, random_state=None, registry=None):
    logger.info("Initializing model registry...")
    registry = registry if registry is not None else ModelRegistry()
    datasets = load_datasets(data_dir, test_ratio, random_state)
    registry.build_all(datasets)
    logger.info(f"Model registry initialized with datasets: {registry.dataset_keys()}")
    return registry


def create_app(registry=None, test_config=None):
    app = Flask(__name__)
    app.json.sort_keys = False
    app.config['DATA_DIR'] = config.DATA_DIR
    if test_config:
        app.config.update(test_config)

    initialize = None
    if registry is None:
        registry = ModelRegistry()

        def initialize(reg):
            initialize_registry(app.config['DATA_DIR'], registry=reg)

        try:
            initialize(registry)
        except Exception as e:
            logger.exception(f"Failed to initialize model registry: {e}")

    register_recommend(app, registry, initialize)
    return app


if __name__ == '__main__':
    setup_logging()
    app = create_app()
    app.run(host='127.0.0.1', port=5000, debug=False)
