from datetime import datetime
from app import create_app
from extensions import db
from models import (User, Participant, Event, EventRegistration, ScheduleItem, Category, CategoryType,
                    Judge, JudgeGroup, Project, Submission, Assignment, Evaluation)

app = create_app()

with app.app_context():
    db.create_all()

    # --- 1. CLEAR ---
    print("Clearing old data...")
    # Children first
    db.session.query(Evaluation).delete()
    db.session.query(Assignment).delete()
    db.session.query(Submission).delete()
    db.session.query(Project).delete()
    db.session.query(Judge).delete()
    db.session.query(JudgeGroup).delete()
    db.session.query(Category).delete()
    db.session.query(EventRegistration).delete()
    db.session.query(Event).delete()
    db.session.query(Participant).delete()
    db.session.query(ScheduleItem).delete()
    db.session.query(User).delete()
    db.session.commit()
    print("Done.")

    # --- 2. SEED ---
    print("Adding sample data...")

    try:
        admin = User(name='Admin', email='admin@hackathon.local')
        admin.set_password('admin')
        db.session.add(admin)
        db.session.commit()

        general = Category(id='general', name='General', type=CategoryType.GENERAL)
        best_ui = Category(id='best-ui', name='Best UI', type=CategoryType.INHOUSE)
        sponsor = Category(id='acme', name='Acme Sponsor Prize', type=CategoryType.SPONSOR)
        mlh = Category(id='mlh-domain', name='Best Domain Name', type=CategoryType.MLH)
        db.session.add_all([general, best_ui, sponsor, mlh])
        db.session.commit()

        judges = [Judge(name=f'General Judge {i}', email=f'general{i}@hackathon.local', category_id=general.id)
                  for i in range(1, 9)]
        judges += [Judge(name=f'UI Judge {i}', email=f'ui{i}@hackathon.local', category_id=best_ui.id)
                   for i in range(1, 5)]
        judges += [Judge(name=f'Acme Judge {i}', email=f'acme{i}@hackathon.local', category_id=sponsor.id)
                   for i in range(1, 4)]
        db.session.add_all(judges)
        db.session.commit()

        for i in range(1, 7):
            project = Project(name=f'Project {i}', url=f'https://devpost.com/software/project-{i}',
                              location=f'T{i:02d}')
            db.session.add(project)
            db.session.flush()
            db.session.add(Submission(project_id=project.id, category_id=general.id))
            if i % 2:
                db.session.add(Submission(project_id=project.id, category_id=best_ui.id))
            if i % 3 == 0:
                db.session.add(Submission(project_id=project.id, category_id=sponsor.id))
        db.session.commit()

        participants = [
            Participant(first_name='Ada', last_name='Lovelace', email='ada@example.com', status='CONFIRMED'),
            Participant(first_name='Alan', last_name='Turing', email='alan@example.com', status='WAITLISTED'),
            Participant(first_name='Grace', last_name='Hopper', email='grace@example.com', status='PENDING'),
        ]
        db.session.add_all(participants)

        db.session.add_all([
            Event(name='Intro to Flask', event_type='WORKSHOP', location='Room 101', capacity=30,
                  start_time=datetime(2026, 3, 7, 11, 0), end_time=datetime(2026, 3, 7, 12, 0)),
            Event(name='Lunch', event_type='FOOD', location='Atrium',
                  start_time=datetime(2026, 3, 7, 12, 30), end_time=datetime(2026, 3, 7, 13, 30)),
        ])
        db.session.add(ScheduleItem(name='Opening ceremony', start_time=datetime(2026, 3, 7, 9, 0),
                                    end_time=datetime(2026, 3, 7, 9, 30), location='Main hall',
                                    visibility='public', created_by=admin.id))
        db.session.commit()

        print("Sample data added. Log in as admin@hackathon.local / admin")
    except Exception as e:
        db.session.rollback()
        print(f"Seeding failed: {e}")
