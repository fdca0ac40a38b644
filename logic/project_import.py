# logic/project_import.py
# Import of projects and their prize submissions from a DevPost CSV export

import csv
import io
import logging

from extensions import db
from models import Assignment, Category, Evaluation, Project, Submission

logger = logging.getLogger(__name__)

GENERAL_CATEGORY_NAME = 'General'

DEVPOST_COLUMNS = {
    'Project Title': 'title',
    'Submission Url': 'url',
    'Project Status': 'status',
    'Project Created At': 'created_at',
    '"Try it out" Links': 'links',
    'Video Demo Link': 'video_link',
    'Opt-In Prizes': 'categories_csv',
    'Submitter First Name': 'submitter_first_name',
    'Submitter Last Name': 'submitter_last_name',
    'Submitter Email': 'submitter_email',
    'What Is The Table Number You Have Been Assigned By Organizers (Eg. 50)': 'location',
    'What School Do You Attend? If You Are No Longer In School, What University Did You Attend Most Recently?':
        'school',
    'List All Of The Domain Names Your Team Has Registered With .Tech During This Hackathon.': 'domains',
}


def normalize_headers(headers):
    """
    Shortens the DevPost headers. DevPost writes a single '...' header for
    team members 2-4, which is expanded into their name and email columns.
    """
    result = []
    for header in headers:
        if header in DEVPOST_COLUMNS:
            result.append(DEVPOST_COLUMNS[header])
        elif header == '...':
            for i in (2, 3, 4):
                result.extend([f'Team Member {i} First Name',
                               f'Team Member {i} Last Name',
                               f'Team Member {i} Email'])
        else:
            result.append(header)
    return result


def parse_devpost_csv(text):
    reader = csv.reader(io.StringIO(text))
    try:
        headers = normalize_headers(next(reader))
    except StopIteration:
        return []

    rows = []
    for values in reader:
        if not any(v.strip() for v in values):
            continue
        # Rows can be shorter or longer than the header
        row = {h: (values[i] if i < len(values) else '') for i, h in enumerate(headers)}
        rows.append(row)
    return rows


def submitted_category_names(categories_csv):
    names = [name.strip() for name in (categories_csv or '').split(',')]
    names = [name for name in names if name]
    if GENERAL_CATEGORY_NAME not in names:
        names.append(GENERAL_CATEGORY_NAME)
    return list(dict.fromkeys(names))


def import_projects_from_devpost(text):
    """
    Replaces all projects (with their submissions, assignments and
    evaluations) by the ones in the CSV. Draft projects are skipped, every
    project is also entered in the General category.
    Returns {'success', 'imported', 'skipped'} or {'success': False, 'error'}.
    """
    if not text or not text.strip():
        return {'success': False, 'error': 'File is empty!'}

    try:
        rows = parse_devpost_csv(text)
        category_ids = {c.name: c.id for c in Category.query.all()}

        Evaluation.query.delete()
        Assignment.query.delete()
        Submission.query.delete()
        Project.query.delete()

        imported = skipped = 0
        for row in rows:
            if row.get('status', '').strip().lower() == 'draft':
                skipped += 1
                continue

            project = Project(name=row.get('title', ''), url=row.get('url') or None,
                              location=row.get('location', ''), location2='', status='created')
            db.session.add(project)
            db.session.flush()
            imported += 1

            for name in submitted_category_names(row.get('categories_csv')):
                if name not in category_ids:
                    logger.info("Project '%s': category '%s' doesn't exist. Skipping submission to it.",
                                project.name, name)
                    continue
                db.session.add(Submission(project_id=project.id, category_id=category_ids[name]))

        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.exception('Error importing projects')
        return {'success': False, 'error': str(e) or 'Failed to import projects'}

    logger.info('Imported %d projects, skipped %d drafts', imported, skipped)
    return {'success': True, 'imported': imported, 'skipped': skipped}
