"""Sample resume content used for seeding a fresh store and in tests."""

from folio.contexts.schema.resume_data_structure import ResumeDocument

SAMPLE_SLUG = "jane-doe"
SAMPLE_TITLE = "Jane Doe - CV"

SAMPLE_RESUME = {
    "basics": {
        "name": "Jane Doe",
        "label": "Senior Backend Engineer",
        "email": "jane.doe@example.com",
        "phone": "+49 30 1234567",
        "url": "https://janedoe.dev",
        "summary": (
            "Backend engineer with eight years of experience building data-heavy web "
            "services in Python. Focused on reliable APIs, pragmatic testing and "
            "mentoring small teams through growth."
        ),
        "location": {"city": "Berlin", "countryCode": "DE", "region": "Berlin"},
        "profiles": [
            {
                "network": "LinkedIn",
                "username": "janedoe",
                "url": "https://www.linkedin.com/in/janedoe",
            },
            {"network": "GitHub", "username": "janedoe", "url": "https://github.com/janedoe"},
        ],
    },
    "work": [
        {
            "id": "work-1",
            "name": "Northwind Analytics",
            "position": "Senior Backend Engineer",
            "startDate": "2021-03",
            "isCurrentRole": True,
            "location": "Berlin, DE",
            "highlights": [
                "Cut report generation time from 40 minutes to 3 by moving to incremental aggregation",
                "Led migration of 14 services to a shared deployment pipeline",
                "Mentored four engineers through their first on-call rotation",
            ],
        },
        {
            "id": "work-2",
            "name": "Contoso Logistics",
            "position": "Backend Engineer",
            "startDate": "2018-01",
            "endDate": "2021-02",
            "location": "Hamburg, DE",
            "highlights": [
                "Built the shipment tracking API serving 2M requests per day",
                "Introduced contract tests between the tracking and billing services",
            ],
        },
        {
            "id": "work-3",
            "name": "Fabrikam",
            "position": "Junior Developer",
            "startDate": "2016-06",
            "endDate": "2017-12",
            "highlights": ["Maintained internal reporting dashboards"],
        },
    ],
    "education": [
        {
            "id": "edu-1",
            "institution": "Technical University of Munich",
            "area": "Computer Science",
            "studyType": "MSc",
            "startDate": "2014-10",
            "endDate": "2016-05",
            "score": "1.7",
        }
    ],
    "skills": [
        {"name": "Languages", "keywords": ["Python", "SQL", "Go"]},
        {"name": "Frameworks", "keywords": ["Flask", "Django", "FastAPI"]},
        {"name": "Data", "keywords": ["PostgreSQL", "Redis", "Kafka"]},
        {"name": "Practices", "keywords": ["Testing", "Code review", "Incident response"]},
    ],
    "projects": [
        {
            "name": "tidewatch",
            "description": "Open source tide prediction service",
            "startDate": "2022-04",
            "highlights": ["Serves forecasts for 300 coastal stations"],
            "keywords": ["Python", "NumPy"],
            "url": "https://github.com/janedoe/tidewatch",
        }
    ],
    "certificates": [
        {"name": "AWS Certified Developer", "date": "2022-09", "issuer": "Amazon Web Services"}
    ],
    "languages": [
        {"language": "English", "fluency": "Native"},
        {"language": "German", "fluency": "Professional"},
    ],
    "volunteer": [
        {
            "organization": "Code Club Berlin",
            "position": "Mentor",
            "startDate": "2019-09",
            "highlights": ["Teaches weekly Python sessions for teenagers"],
        }
    ],
}


def sample_document() -> ResumeDocument:
    """A fully filled-in resume that scores 100."""
    return ResumeDocument.from_dict(SAMPLE_RESUME)
