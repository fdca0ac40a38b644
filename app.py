# app.py
# Flask application built with the Application Factory pattern

import logging
import os

import click
from flask import Flask, redirect, render_template, url_for
from config import Config
from extensions import db, migrate

# Models are imported here so that Flask-Migrate sees every table
from models import (User, Participant, Event, EventRegistration, ScheduleItem, Category, CategoryType,
                    Judge, JudgeGroup, Project, Submission, Assignment, Evaluation, PARTICIPANT_STATUSES)


def configure_logging(app):
    logging.basicConfig(
        level=app.config.get('LOG_LEVEL', 'INFO'),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    configure_logging(app)

    if app.config['SQLALCHEMY_DATABASE_URI'].startswith('sqlite:///'):
        os.makedirs(os.path.join(app.config['BASE_DIR'], 'instance'), exist_ok=True)

    @app.context_processor
    def inject_display_maps():
        STATUS_LABELS = {
            'PENDING': 'Pending',
            'CONFIRMED': 'Confirmed',
            'WAITLISTED': 'Waitlisted',
            'CHECKED_IN': 'Checked in',
        }
        return dict(STATUS_LABELS=STATUS_LABELS,
                    PARTICIPANT_STATUSES=PARTICIPANT_STATUSES,
                    CATEGORY_TYPES=list(CategoryType))

    db.init_app(app)
    migrate.init_app(app, db)

    from routes.auth import auth_bp
    from routes.main import main_bp
    from routes.admin import admin_bp
    from routes.qr import qr_bp
    from routes.plan import plan_bp
    from routes.emails import emails_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(main_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(qr_bp)
    app.register_blueprint(plan_bp)
    app.register_blueprint(emails_bp)

    @app.route('/')
    def index():
        return redirect(url_for('main.dashboard'))

    @app.errorhandler(404)
    def not_found(error):
        return render_template('error.html', message='Page not found.'), 404

    @app.cli.command('create-admin')
    @click.argument('name')
    @click.argument('email')
    @click.argument('password')
    def create_admin(name, email, password):
        """Create a staff account that can sign in to the dashboard."""
        if User.query.filter_by(email=email.lower()).first():
            raise click.ClickException(f'User {email} already exists.')
        user = User(name=name, email=email.lower())
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        click.echo(f'Created staff account {email}.')

    return app
