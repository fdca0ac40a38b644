# routes/auth.py
# Staff sign-in and the login_required gate

from functools import wraps

from flask import Blueprint, render_template, request, redirect, url_for, session, flash, jsonify
from models.user import User

auth_bp = Blueprint('auth', __name__)


def login_required(f):
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if 'user_id' not in session:
            if request.path.startswith('/api/'):
                return jsonify({'message': 'Unauthorized'}), 401
            flash('Please sign in to access this page.', 'error')
            return redirect(url_for('auth.login', next=request.path))
        return f(*args, **kwargs)
    return decorated_function


def _safe_next(target):
    # Only local paths, never another host
    if target and target.startswith('/') and not target.startswith('//'):
        return target
    return url_for('main.dashboard')


@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    if 'user_id' in session:
        return redirect(url_for('main.dashboard'))

    if request.method == 'POST':
        email = (request.form.get('email') or '').strip().lower()
        password = request.form.get('password') or ''
        if not email or not password:
            flash('Please enter your email and password.', 'error')
            return redirect(url_for('auth.login', next=request.args.get('next')))

        user = User.query.filter_by(email=email).first()
        if user and user.check_password(password):
            session.clear()
            session['user_id'] = user.id
            session['user_name'] = user.name
            flash('Signed in successfully.', 'success')
            return redirect(_safe_next(request.args.get('next')))

        flash('Invalid email or password.', 'error')
        return redirect(url_for('auth.login', next=request.args.get('next')))

    return render_template('login.html')


@auth_bp.route('/logout')
def logout():
    session.clear()
    flash('You have been signed out.', 'success')
    return redirect(url_for('auth.login'))
