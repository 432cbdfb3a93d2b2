# institution_recommender/api.py
"""
Recommendation endpoints for the frontend:
 - GET  /api/health                     -> { status, initialized, timestamp }
 - GET  /api/datasets                   -> { success, datasets: [key, ...] }
 - POST /api/recommendations            -> { success, recommendations: { college, model }, ... }
 - GET  /api/model-stats/<datasetName>  -> { success, stats }
 - GET  /api/evaluate/<datasetName>     -> { success, evaluation }
 - GET  /api/model-info/<datasetName>   -> { success, modelInfo: { stats, evaluation, tree } }
Use register_recommend(app, registry, initialize) to attach them to a Flask app.
"""
import threading
from datetime import datetime, timezone

from flask import jsonify, request
from loguru import logger
from werkzeug.exceptions import HTTPException

from . import config
from .errors import ModelNotFound, Unclassifiable


def _now():
    return datetime.now(timezone.utc).isoformat()


def _validation_message(validation):
    # the registry only reports structure; wording lives here
    if validation.error is not None:
        return str(validation.error)
    if validation.missing_attributes:
        return "Missing required fields: " + ", ".join(validation.missing_attributes)
    if validation.invalid_attributes:
        return "Invalid values for: " + ", ".join(i.attribute for i in validation.invalid_attributes)
    return "Invalid student data"


def register_recommend(app, registry, initialize=None):
    """
    Attach the /api routes for `registry`.

    `initialize(registry)` loads and builds the models. While the registry is
    still empty, data routes call it again before answering, so a startup with
    no training files recovers once the files show up.
    """
    app.extensions['recommender_registry'] = registry
    init_lock = threading.Lock()

    def _ensure_initialized():
        if initialize is None or registry.dataset_keys():
            return
        with init_lock:
            if registry.dataset_keys():
                return
            try:
                initialize(registry)
            except Exception as e:
                logger.exception(f"Failed to initialize model registry: {e}")

    @app.route('/api/health')
    def _api_health():
        return jsonify({
            'status': 'OK',
            'initialized': bool(registry.dataset_keys()),
            'timestamp': _now(),
        })

    @app.route('/api/datasets')
    def _api_datasets():
        _ensure_initialized()
        return jsonify({'success': True, 'datasets': registry.dataset_keys()})

    @app.route('/api/recommendations', methods=['POST'])
    def _api_recommendations():
        _ensure_initialized()
        data = request.get_json(silent=True) or {}
        student_data = data.get('studentData')
        dataset_name = data.get('datasetName') or config.DEFAULT_DATASET

        if not student_data or not isinstance(student_data, dict):
            return jsonify({'success': False, 'error': 'Student data is required'}), 400

        validation = registry.validate(student_data, dataset_name)
        if validation.error is not None:
            return jsonify({'success': False, 'error': str(validation.error)}), 404
        if not validation.valid:
            return jsonify({
                'success': False,
                'error': _validation_message(validation),
                'details': validation.to_dict(),
            }), 400

        try:
            label = registry.predict(dataset_name, student_data)
        except ModelNotFound as e:
            return jsonify({'success': False, 'error': str(e)}), 404
        except Unclassifiable as e:
            logger.warning(f"Unclassifiable input for {dataset_name}: {student_data}")
            return jsonify({
                'success': False,
                'error': 'Failed to generate recommendations',
                'message': str(e),
            }), 500

        return jsonify({
            'success': True,
            'recommendations': {'college': label, 'model': dataset_name},
            'studentProfile': {'raw': student_data},
            'timestamp': _now(),
        })

    @app.route('/api/model-stats/<dataset_name>')
    def _api_model_stats(dataset_name):
        _ensure_initialized()
        stats = registry.stats(dataset_name)
        if stats is None:
            return jsonify({'success': False, 'error': str(ModelNotFound(dataset_name))}), 404
        return jsonify({'success': True, 'stats': stats})

    @app.route('/api/evaluate/<dataset_name>')
    def _api_evaluate(dataset_name):
        _ensure_initialized()
        if dataset_name not in registry:
            return jsonify({'success': False, 'error': str(ModelNotFound(dataset_name))}), 404
        evaluation = registry.evaluate(dataset_name)
        if evaluation is None:
            return jsonify({'success': False, 'error': f"No held-out records for dataset: {dataset_name}"}), 404
        return jsonify({'success': True, 'evaluation': evaluation})

    @app.route('/api/model-info/<dataset_name>')
    def _api_model_info(dataset_name):
        _ensure_initialized()
        stats = registry.stats(dataset_name)
        if stats is None:
            return jsonify({'success': False, 'error': str(ModelNotFound(dataset_name))}), 404
        return jsonify({
            'success': True,
            'modelInfo': {
                'stats': stats,
                'evaluation': registry.evaluate(dataset_name),
                'tree': registry.get(dataset_name).tree.to_dict(),
            },
        })

    @app.errorhandler(404)
    def _not_found(e):
        return jsonify({'success': False, 'error': 'Endpoint not found'}), 404

    @app.errorhandler(Exception)
    def _unhandled(e):
        if isinstance(e, HTTPException):
            return jsonify({'success': False, 'error': e.description}), e.code
        logger.exception("Unhandled error")
        return jsonify({'success': False, 'error': 'Internal server error', 'message': str(e)}), 500

    return app


__all__ = ['register_recommend']
