#!/usr/bin/env python3
"""
Database Reset Script for LibraryHub
Usage: python reset_data.py
"""

import sys
from sqlalchemy import MetaData
from sqlalchemy.exc import SQLAlchemyError
from libraryhub import create_app, db
from libraryhub.models.user import User

def reset_database():
    """Reset the entire database"""
    app = create_app()

    with app.app_context():
        print("🔄 Starting database reset...")

        try:
            # Drop all tables, even with circular dependencies
            print("📋 Reflecting and dropping all tables...")
            meta = MetaData()
            meta.reflect(bind=db.engine)
            meta.drop_all(bind=db.engine)
            print("✅ All tables dropped successfully")

            print("🏗️  Creating tables...")
            db.create_all()
            print("✅ All tables created successfully")

            print("👤 Creating default admin...")
            admin, password = User.create_default_admin()

            print("\n🎉 Database reset completed successfully!")
            print("=" * 50)
            print("Default Login Credentials:")
            print(f"Username: {admin.username}")
            print(f"Password: {password}")
            print("=" * 50)

        except SQLAlchemyError as e:
            print(f"❌ Error during database reset: {str(e)}")
            sys.exit(1)

def confirm_reset():
    """Confirm reset with user"""
    print("⚠️  WARNING: This will delete ALL data in the database!")
    print("This action cannot be undone.")

    response = input("\nAre you sure you want to continue? (type 'YES' to confirm): ")

    if response != 'YES':
        print("❌ Database reset cancelled.")
        sys.exit(0)

    return True

if __name__ == '__main__':
    confirm_reset()
    reset_database()
