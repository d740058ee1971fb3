from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_login import LoginManager
from flask_cors import CORS
from config import Config
import logging

db = SQLAlchemy()
migrate = Migrate()
login = LoginManager()
cors = CORS()

def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Setup logging
    logging.basicConfig(level=logging.INFO)

    # Initialize Flask extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login.init_app(app)
    cors.init_app(
        app,
        resources={r'/api/*': {'origins': app.config.get('CORS_ORIGINS', [])}},
        supports_credentials=True
    )

    # Make every model known to the metadata before create_all / migrations
    from libraryhub import models  # noqa: F401

    # Register error handlers for consistent error responses
    from libraryhub.services.error_service import register_error_handlers
    register_error_handlers(app)

    register_blueprints(app)
    register_cli_commands(app)

    app.logger.info(f"{app.config.get('APP_NAME', 'LibraryHub')} application created")
    return app

def register_blueprints(app):
    """Register all application blueprints"""
    from libraryhub.routes.auth import bp as auth_bp
    app.register_blueprint(auth_bp, url_prefix='/api/v1/auth')

    from libraryhub.routes.collections import bp as collections_bp
    app.register_blueprint(collections_bp, url_prefix='/api/v1/collections')

    from libraryhub.routes.advance_payments import bp as advance_payments_bp
    app.register_blueprint(advance_payments_bp, url_prefix='/api/v1/advance-payments')

    from libraryhub.routes.students import bp as students_bp
    app.register_blueprint(students_bp, url_prefix='/api/v1/students')

    from libraryhub.routes.branches import bp as branches_bp
    app.register_blueprint(branches_bp, url_prefix='/api/v1/branches')

    from libraryhub.routes.dashboard import bp as dashboard_bp
    app.register_blueprint(dashboard_bp, url_prefix='/api/v1/dashboard')

    from libraryhub.routes.health import bp as health_bp
    app.register_blueprint(health_bp)

def register_cli_commands(app):
    """Register maintenance commands on the flask CLI"""

    @app.cli.command('create-admin')
    def create_admin_command():
        """Create the default admin user if it does not exist"""
        from libraryhub.models.user import User
        admin, password = User.create_default_admin()
        if password:
            print(f"Created admin '{admin.username}' with password: {password}")
        else:
            print(f"Admin '{admin.username}' already exists")

# User loader for Flask-Login
@login.user_loader
def load_user(user_id):
    from libraryhub.models.user import User
    return db.session.get(User, int(user_id))

@login.unauthorized_handler
def unauthorized():
    from libraryhub.services.error_service import error_service
    return error_service.handle_unauthorized_error()
