import pytest

from app import create_app
from config import TestConfig
from extensions import db as _db
from models import User, Category, CategoryType, Judge


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def db(app):
    return _db


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def staff(db):
    user = User(name='Staff Member', email='staff@hackathon.local')
    user.set_password('secret')
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def auth_client(client, staff):
    response = client.post('/login', data={'email': 'staff@hackathon.local', 'password': 'secret'})
    assert response.status_code == 302
    return client


@pytest.fixture
def make_category(db):
    def _make(category_id, name, category_type):
        category = Category(id=category_id, name=name, type=category_type)
        db.session.add(category)
        db.session.commit()
        return category
    return _make


@pytest.fixture
def make_judges(db):
    def _make(category, count, prefix=None):
        prefix = prefix or category.id
        judges = [Judge(name=f'{prefix} judge {i:02d}', email=f'{prefix}{i}@judges.test', category_id=category.id)
                  for i in range(1, count + 1)]
        db.session.add_all(judges)
        db.session.commit()
        return judges
    return _make


@pytest.fixture
def general(make_category):
    return make_category('general', 'General', CategoryType.GENERAL)
