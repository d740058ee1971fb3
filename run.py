from libraryhub import create_app, db
from libraryhub.models import (
    User, Branch, Schedule, Seat, Locker, Student, StudentMembershipHistory, AdvancePayment
)
from sqlalchemy.exc import SQLAlchemyError

# Create Flask application instance
app = create_app()

@app.shell_context_processor
def make_shell_context():
    return {
        'db': db,
        'User': User,
        'Branch': Branch,
        'Schedule': Schedule,
        'Seat': Seat,
        'Locker': Locker,
        'Student': Student,
        'StudentMembershipHistory': StudentMembershipHistory,
        'AdvancePayment': AdvancePayment
    }

def initialize_database():
    """Initialize database tables if needed"""
    with app.app_context():
        try:
            # Test if tables exist by making a simple query
            User.query.first()
            print("✅ Database tables already exist")
        except SQLAlchemyError as e:
            db.session.rollback()
            print(f"⚠️  Creating database tables: {str(e)}")
            db.create_all()
            print("✅ Database tables created successfully")

        admin, password = User.create_default_admin()
        if password:
            print(f"👤 Default admin created: {admin.username} / {password}")

def display_config_info():
    """Display important configuration information"""
    print("=" * 60)
    print(f"🚀 {app.config.get('APP_NAME')} - Configuration")
    print("=" * 60)
    print(f"🗄️  Database: {app.config.get('SQLALCHEMY_DATABASE_URI', 'SQLite')[:50]}...")
    print(f"🕒 Timezone: {app.config.get('TIMEZONE')}")
    print(f"🌍 CORS origins: {', '.join(app.config.get('CORS_ORIGINS', []))}")
    print(f"🐛 Debug Mode: {app.config.get('DEBUG', False)}")
    print(f"🔐 Secret Key: {'Set' if app.config.get('SECRET_KEY') else 'Not Set'}")
    print("=" * 60)

if __name__ == '__main__':
    print("🚀 Starting LibraryHub API...")

    display_config_info()

    print("📊 Checking database...")
    initialize_database()

    print("🌐 Server starting on http://0.0.0.0:5000")
    print("🔄 Press Ctrl+C to stop the server")

    try:
        app.run(debug=app.config.get('DEBUG', False), host='0.0.0.0', port=5000, threaded=True)
    except KeyboardInterrupt:
        print("\n👋 Server stopped by user")
