# routes/admin.py
# Judging administration: categories, judges, projects, assignments, scores

import csv
import io
import logging

from flask import Blueprint, render_template, request, redirect, url_for, flash
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import joinedload

from extensions import db
from models import (Assignment, Category, CategoryType, Evaluation, Judge, JudgeGroup, Project, Submission)
from logic import (regenerate_assignments, regenerate_judge_groups, import_projects_from_devpost,
                   load_score_table, sort_score_table, generate_random_scores)
from logic.scoring import SORT_FIELDS
from routes.auth import login_required

logger = logging.getLogger(__name__)

admin_bp = Blueprint('admin', __name__, url_prefix='/admin')


def parse_csv_lines(text, width):
    """Pasted 'a,b,c' lines -> list of stripped tuples. Raises ValueError on a short line."""
    rows = []
    for line_no, values in enumerate(csv.reader(io.StringIO(text or '')), start=1):
        values = [v.strip() for v in values]
        if not any(values):
            continue
        if len(values) < width:
            raise ValueError(f'Line {line_no}: expected {width} comma-separated values.')
        rows.append(tuple(values[:width]))
    return rows


# --- Categories and judges ---
@admin_bp.route('/judges-and-categories')
@login_required
def judges_and_categories():
    categories = Category.query.order_by(Category.id).all()
    judges = Judge.query.options(joinedload(Judge.category), joinedload(Judge.judge_group)) \
        .order_by(Judge.name).all()
    groups = JudgeGroup.query.options(joinedload(JudgeGroup.judges)).order_by(JudgeGroup.name).all()
    return render_template('admin/judges_and_categories.html',
                           categories=categories, judges=judges, groups=groups)


@admin_bp.route('/categories', methods=['POST'])
@login_required
def create_category():
    category_id = (request.form.get('id') or '').strip()
    name = (request.form.get('name') or '').strip()
    try:
        category_type = CategoryType.parse(request.form.get('type') or 'General')
    except ValueError as e:
        flash(str(e), 'error')
        return redirect(url_for('admin.judges_and_categories'))

    if not category_id or not name:
        flash('Category id and name are required.', 'error')
        return redirect(url_for('admin.judges_and_categories'))

    db.session.add(Category(id=category_id, name=name, type=category_type))
    try:
        db.session.commit()
        flash(f'Category "{name}" created.', 'success')
    except IntegrityError:
        db.session.rollback()
        flash(f'A category with id "{category_id}" already exists.', 'error')
    return redirect(url_for('admin.judges_and_categories'))


@admin_bp.route('/categories/bulk', methods=['POST'])
@login_required
def create_categories_bulk():
    try:
        rows = parse_csv_lines(request.form.get('rows'), 3)
        categories = [Category(id=cid, name=name, type=CategoryType.parse(ctype)) for cid, name, ctype in rows]
        if not categories:
            raise ValueError('Nothing to import.')
        db.session.add_all(categories)
        db.session.commit()
        flash(f'{len(categories)} categories created.', 'success')
    except ValueError as e:
        flash(str(e), 'error')
    except IntegrityError:
        db.session.rollback()
        flash('One of the category ids already exists. Nothing was imported.', 'error')
    except Exception as e:
        db.session.rollback()
        flash(f'Failed to create categories: {e}', 'error')
    return redirect(url_for('admin.judges_and_categories'))


@admin_bp.route('/category/<category_id>/edit', methods=['GET', 'POST'])
@login_required
def edit_category(category_id):
    category = Category.query.get_or_404(category_id)

    if request.method == 'POST':
        new_id = (request.form.get('id') or '').strip() or category.id
        name = (request.form.get('name') or '').strip()
        try:
            category_type = CategoryType.parse(request.form.get('type'))
            if not name:
                raise ValueError('Category name is required.')

            if new_id != category.id:
                if db.session.get(Category, new_id):
                    raise ValueError(f'A category with id "{new_id}" already exists.')
                # Children move over to the new row before the old one goes
                db.session.add(Category(id=new_id, name=name, type=category_type))
                db.session.flush()
                for model in (Judge, JudgeGroup, Submission, Evaluation):
                    model.query.filter_by(category_id=category.id) \
                        .update({model.category_id: new_id}, synchronize_session=False)
                Category.query.filter_by(id=category.id).delete(synchronize_session=False)
            else:
                category.name = name
                category.type = category_type

            db.session.commit()
            flash('Category updated.', 'success')
            return redirect(url_for('admin.judges_and_categories'))
        except ValueError as e:
            db.session.rollback()
            flash(str(e), 'error')
        except Exception as e:
            db.session.rollback()
            flash(f'Failed to update category: {e}', 'error')
        return redirect(url_for('admin.edit_category', category_id=category_id))

    return render_template('admin/edit_category.html', category=category)


@admin_bp.route('/category/<category_id>/delete', methods=['POST'])
@login_required
def delete_category(category_id):
    category = Category.query.get_or_404(category_id)

    if Judge.query.filter_by(category_id=category.id).first() or \
            Submission.query.filter_by(category_id=category.id).first():
        flash(f'Cannot delete "{category.name}": it still has judges or submissions.', 'error')
        return redirect(url_for('admin.judges_and_categories'))

    try:
        group_ids = [g.id for g in JudgeGroup.query.filter_by(category_id=category.id)]
        Assignment.query.filter(Assignment.judge_group_id.in_(group_ids)).delete(synchronize_session=False)
        JudgeGroup.query.filter_by(category_id=category.id).delete(synchronize_session=False)
        db.session.delete(category)
        db.session.commit()
        flash(f'Category "{category.name}" deleted.', 'success')
    except Exception as e:
        db.session.rollback()
        flash(f'Failed to delete category: {e}', 'error')
    return redirect(url_for('admin.judges_and_categories'))


@admin_bp.route('/judges', methods=['POST'])
@login_required
def create_judge():
    name = (request.form.get('name') or '').strip()
    email = (request.form.get('email') or '').strip().lower()
    category_id = request.form.get('category_id')

    if not name or not email or not category_id:
        flash('All fields are required.', 'error')
        return redirect(url_for('admin.judges_and_categories'))
    if db.session.get(Category, category_id) is None:
        flash(f'Category "{category_id}" does not exist.', 'error')
        return redirect(url_for('admin.judges_and_categories'))

    db.session.add(Judge(name=name, email=email, category_id=category_id))
    try:
        db.session.commit()
        flash(f'Judge {name} added.', 'success')
    except IntegrityError:
        db.session.rollback()
        flash(f'A judge with email {email} already exists.', 'error')
    return redirect(url_for('admin.judges_and_categories'))


@admin_bp.route('/judges/bulk', methods=['POST'])
@login_required
def create_judges_bulk():
    try:
        rows = parse_csv_lines(request.form.get('rows'), 3)
        known = {c.id for c in Category.query.all()}
        unknown = sorted({cid for _, _, cid in rows if cid not in known})
        if unknown:
            raise ValueError(f"Unknown categories: {', '.join(unknown)}")
        judges = [Judge(name=name, email=email.lower(), category_id=cid) for name, email, cid in rows]
        if not judges:
            raise ValueError('Nothing to import.')
        db.session.add_all(judges)
        db.session.commit()
        flash(f'{len(judges)} judges added.', 'success')
    except ValueError as e:
        flash(str(e), 'error')
    except IntegrityError:
        db.session.rollback()
        flash('One of the judge emails already exists. Nothing was imported.', 'error')
    except Exception as e:
        db.session.rollback()
        flash(f'Failed to create judges: {e}', 'error')
    return redirect(url_for('admin.judges_and_categories'))


@admin_bp.route('/judge/<judge_id>/edit', methods=['GET', 'POST'])
@login_required
def edit_judge(judge_id):
    judge = Judge.query.get_or_404(judge_id)

    if request.method == 'POST':
        name = (request.form.get('name') or '').strip()
        email = (request.form.get('email') or '').strip().lower()
        category_id = request.form.get('category_id')
        if not name or not email or not category_id:
            flash('All fields are required.', 'error')
            return redirect(url_for('admin.edit_judge', judge_id=judge.id))
        if db.session.get(Category, category_id) is None:
            flash(f'Category "{category_id}" does not exist.', 'error')
            return redirect(url_for('admin.edit_judge', judge_id=judge.id))

        judge.name = name
        judge.email = email
        judge.category_id = category_id
        try:
            db.session.commit()
            flash('Judge updated.', 'success')
            return redirect(url_for('admin.judges_and_categories'))
        except IntegrityError:
            db.session.rollback()
            flash(f'A judge with email {email} already exists.', 'error')
            return redirect(url_for('admin.edit_judge', judge_id=judge_id))

    categories = Category.query.order_by(Category.id).all()
    return render_template('admin/edit_judge.html', judge=judge, categories=categories)


@admin_bp.route('/judge/<judge_id>/delete', methods=['POST'])
@login_required
def delete_judge(judge_id):
    judge = Judge.query.get_or_404(judge_id)
    try:
        db.session.delete(judge)
        db.session.commit()
        flash(f'Judge {judge.name} removed.', 'success')
    except Exception as e:
        db.session.rollback()
        flash(f'Failed to remove judge: {e}', 'error')
    return redirect(url_for('admin.judges_and_categories'))


@admin_bp.route('/judge-groups/regenerate', methods=['POST'])
@login_required
def assign_judges_to_groups():
    result = regenerate_judge_groups()
    if result['success']:
        flash(f"Created {result['group_count']} judge groups.", 'success')
    else:
        flash(result['error'], 'error')
    return redirect(url_for('admin.judges_and_categories'))


# --- Projects ---
@admin_bp.route('/projects')
@login_required
def projects():
    projects = Project.query.options(joinedload(Project.submissions).joinedload(Submission.category)) \
        .order_by(Project.name).all()
    return render_template('admin/projects.html', projects=projects)


@admin_bp.route('/projects/import', methods=['POST'])
@login_required
def import_projects():
    csv_file = request.files.get('csv_file')
    if csv_file is None or not csv_file.filename:
        flash('File is empty!', 'error')
        return redirect(url_for('admin.projects'))

    text = csv_file.read().decode('utf-8-sig', errors='replace')
    result = import_projects_from_devpost(text)
    if result['success']:
        flash(f"Imported {result['imported']} projects, skipped {result['skipped']} drafts.", 'success')
    else:
        flash(result['error'], 'error')
    return redirect(url_for('admin.projects'))


@admin_bp.route('/project/<project_id>/disqualify', methods=['POST'])
@login_required
def disqualify_project(project_id):
    project = Project.query.get_or_404(project_id)
    reason = (request.form.get('reason') or '').strip()
    if not reason:
        flash('A reason is required to disqualify a project.', 'error')
        return redirect(url_for('admin.projects'))

    project.status = 'disqualified'
    project.disqualify_reason = reason
    db.session.commit()
    logger.info('Project %s disqualified: %s', project.id, reason)
    flash(f'Project "{project.name}" disqualified.', 'success')
    return redirect(url_for('admin.projects'))


@admin_bp.route('/project/<project_id>/reinstate', methods=['POST'])
@login_required
def reinstate_project(project_id):
    project = Project.query.get_or_404(project_id)
    project.status = 'created'
    project.disqualify_reason = None
    db.session.commit()
    flash(f'Project "{project.name}" reinstated.', 'success')
    return redirect(url_for('admin.projects'))


# --- Assignments ---
@admin_bp.route('/assignments')
@login_required
def assignments():
    rows = db.session.query(Assignment, JudgeGroup, Category, Project) \
        .join(JudgeGroup, Assignment.judge_group_id == JudgeGroup.id) \
        .join(Category, JudgeGroup.category_id == Category.id) \
        .join(Project, Assignment.project_id == Project.id) \
        .order_by(JudgeGroup.name, Project.name).all()

    judge_counts = dict(
        db.session.query(Judge.judge_group_id, func.count(Judge.id))
        .filter(Judge.judge_group_id.isnot(None))
        .group_by(Judge.judge_group_id).all()
    )

    by_group = {}
    for _, group, category, project in rows:
        entry = by_group.setdefault(group.id, {
            'group': group,
            'category': category,
            'judge_count': judge_counts.get(group.id, 0),
            'projects': [],
        })
        entry['projects'].append(project)

    return render_template('admin/assignments.html',
                           groups=list(by_group.values()),
                           total_assignments=len(rows))


@admin_bp.route('/assignments/regenerate', methods=['POST'])
@login_required
def assign_submissions():
    result = regenerate_assignments()
    if result['success']:
        flash(f"Created {result['count']} assignments for {result['projects_assigned']} projects.", 'success')
    else:
        flash(result['error'], 'error')
    return redirect(url_for('admin.assignments'))


# --- Scorings ---
@admin_bp.route('/scorings')
@login_required
def scorings():
    sort_field = request.args.get('sort', 'name')
    direction = request.args.get('dir', 'asc')
    if sort_field not in SORT_FIELDS:
        sort_field = 'name'
    if direction not in ('asc', 'desc'):
        direction = 'asc'

    rows, total_scores = load_score_table()
    return render_template('admin/scorings.html',
                           rows=sort_score_table(rows, sort_field, direction),
                           total_scores=total_scores,
                           sort_field=sort_field,
                           direction=direction)


@admin_bp.route('/scorings/generate', methods=['POST'])
@login_required
def generate_scores():
    try:
        written = generate_random_scores()
        flash(f'Generated scores for {written} evaluations.', 'success')
    except Exception as e:
        db.session.rollback()
        logger.exception('Error generating scores')
        flash(f'Failed to generate scores: {e}', 'error')
    return redirect(url_for('admin.scorings'))
