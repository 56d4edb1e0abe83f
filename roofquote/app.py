"""
Flask API for Roof Quote
Measures roof outlines, selects buildings and prices numbered quotes
"""

import logging
import os
from typing import Optional

from flask import Flask, current_app, jsonify, request, send_file
from flask_cors import CORS

from roofquote.building_detection import building_rings, select_building
from roofquote.geometry import bounding_box, build_roof_polygons, total_area
from roofquote.models.roof import QuoteStatus, normalize_slope
from roofquote.pdf_generator import generate_pdf_for_quote
from roofquote.quote_engine import (
    build_quote, calculate_quote_price, calculate_total_price, estimate_squares,
    polygons_from_payload, slope_multiplier
)
from roofquote.quote_register import QuoteNotFoundError, QuoteRegister
from roofquote.settings import Settings, get_settings
from roofquote.utils import (
    format_currency, is_number, validate_quote_payload, validate_rings
)

logger = logging.getLogger(__name__)


def _register() -> QuoteRegister:
    return current_app.extensions["quote_register"]


def _settings() -> Settings:
    return current_app.config["SETTINGS"]


def create_app(settings: Optional[Settings] = None,
               register: Optional[QuoteRegister] = None) -> Flask:
    """Build the Flask app with its own settings and quote register"""
    settings = settings or get_settings()

    app = Flask(__name__)
    app.config["SETTINGS"] = settings
    app.extensions["quote_register"] = register or QuoteRegister()
    CORS(app, origins=settings.cors_origin_list())

    @app.errorhandler(QuoteNotFoundError)
    def quote_not_found(e):
        return jsonify({'error': 'Quote not found', 'quote_number': e.args[0]}), 404

    @app.route('/api/health', methods=['GET'])
    def health_check():
        """Health check endpoint"""
        return jsonify({
            'status': 'healthy',
            'service': 'roofquote',
            'quotes': len(_register())
        })

    @app.route('/api/roof/polygons', methods=['POST'])
    def measure_roof():
        """Measure drawn outline rings"""
        try:
            data = request.get_json(silent=True) or {}
            rings = data.get('rings')

            errors = validate_rings(rings)
            if errors:
                return jsonify({'error': 'Validation failed', 'details': errors}), 400

            polygons = build_roof_polygons(rings)
            for polygon, slope in zip(polygons, data.get('slopes') or []):
                polygon.slope = normalize_slope(slope)

            return jsonify({
                'success': True,
                'polygons': [polygon.to_dict() for polygon in polygons],
                'total_area': total_area(polygons).to_dict(),
                'polygon_count': len(polygons),
                'squares': estimate_squares(polygons)
            })

        except Exception as e:
            logger.exception("Error measuring roof")
            return jsonify({'error': str(e)}), 500

    @app.route('/api/roof/detect', methods=['POST'])
    def detect_building():
        """Select the clicked building from candidate footprints and measure it"""
        try:
            data = request.get_json(silent=True) or {}
            point = data.get('point')
            features = data.get('features')

            errors = []
            if not isinstance(point, list) or len(point) != 2 or not all(is_number(v) for v in point):
                errors.append("point must be a [lng, lat] pair")
            if not isinstance(features, (list, dict)):
                errors.append("features must be a GeoJSON FeatureCollection or list of Features")
            max_distance = data.get('max_distance_km', _settings().building_search_km)
            if not is_number(max_distance) or max_distance < 0:
                errors.append("max_distance_km must be a non-negative number")
            if errors:
                return jsonify({'error': 'Validation failed', 'details': errors}), 400

            building = select_building(features, (point[0], point[1]), max_distance)
            if building is None:
                return jsonify({'error': 'No building found near location'}), 404

            rings = building_rings([building])
            polygons = build_roof_polygons(rings)

            return jsonify({
                'success': True,
                'building': building,
                'polygons': [polygon.to_dict() for polygon in polygons],
                'bounding_box': list(bounding_box(rings[0])),
                'total_area': total_area(polygons).to_dict()
            })

        except Exception as e:
            logger.exception("Error detecting building")
            return jsonify({'error': str(e)}), 500

    @app.route('/api/quotes/calculate', methods=['POST'])
    def calculate_price():
        """Price a single area or a set of roof sections without saving"""
        try:
            data = request.get_json(silent=True) or {}

            if 'rings' in data or 'polygons' in data:
                errors = validate_quote_payload(data)
                if errors:
                    return jsonify({'error': 'Validation failed', 'details': errors}), 400
                polygons = polygons_from_payload(data)
                price = calculate_total_price(polygons, data['material_cost_per_unit'])
                return jsonify({
                    'success': True,
                    'price': round(price, 2),
                    'formatted': format_currency(price),
                    'total_area': total_area(polygons).to_dict(),
                    'squares': estimate_squares(polygons)
                })

            missing = [name for name in ('roof_area', 'material_cost_per_unit')
                       if not is_number(data.get(name))]
            if missing:
                details = [f"{name} must be a valid number" for name in missing]
                return jsonify({'error': 'Validation failed', 'details': details}), 400

            slope = data.get('slope')
            price = calculate_quote_price(data['roof_area'], slope, data['material_cost_per_unit'])
            return jsonify({
                'success': True,
                'price': round(price, 2),
                'formatted': format_currency(price),
                'slope_multiplier': slope_multiplier(slope)
            })

        except Exception as e:
            logger.exception("Error calculating price")
            return jsonify({'error': str(e)}), 500

    @app.route('/api/quotes', methods=['POST'])
    def create_quote():
        """Create a numbered quote"""
        try:
            data = request.get_json(silent=True)

            errors = validate_quote_payload(data)
            if errors:
                return jsonify({'error': 'Validation failed', 'details': errors}), 400

            polygons = polygons_from_payload(data)
            status = QuoteStatus(data.get('status') or QuoteStatus.DRAFT.value)
            quote = _register().create(lambda quote_number: build_quote(
                polygons,
                data['material_cost_per_unit'],
                quote_number=quote_number,
                status=status,
                customer_name=data.get('customer_name'),
                address=data.get('address')
            ))
            logger.info("Created quote %s for %s", quote.quote_number, format_currency(quote.total_price))

            return jsonify({'success': True, 'quote': quote.to_dict()}), 201

        except Exception as e:
            logger.exception("Error creating quote")
            return jsonify({'error': str(e)}), 500

    @app.route('/api/quotes', methods=['GET'])
    def list_quotes():
        quotes = _register().all()
        return jsonify({
            'success': True,
            'quotes': [quote.to_dict() for quote in quotes],
            'total_quotes': len(quotes)
        })

    @app.route('/api/quotes/<quote_number>', methods=['GET'])
    def get_quote(quote_number):
        return jsonify({'success': True, 'quote': _register().get(quote_number).to_dict()})

    @app.route('/api/quotes/<quote_number>/pdf', methods=['GET'])
    def quote_pdf(quote_number):
        """Download the PDF estimate for a quote"""
        quote = _register().get(quote_number)
        settings = _settings()

        try:
            pdf_path = generate_pdf_for_quote(
                quote,
                output_dir=settings.pdf_output_dir,
                company_name=settings.company_name,
                company_email=settings.company_email,
                company_phone=settings.company_phone
            )
        except Exception as e:
            logger.exception("Error generating PDF for %s", quote_number)
            return jsonify({'error': str(e)}), 500

        return send_file(
            os.path.abspath(pdf_path),
            mimetype='application/pdf',
            as_attachment=True,
            download_name=f"Roof_Estimate_{quote.quote_number}.pdf"
        )

    return app
