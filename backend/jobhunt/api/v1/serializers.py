from __future__ import annotations

from jobhunt.models.application import Application
from jobhunt.models.job import Job
from jobhunt.models.resume import Resume
from jobhunt.models.user import UserPreferences
from jobhunt.models.types import isoformat


def _enum(value):
    return value.value if value is not None else None


def job_to_dict(job: Job) -> dict:
    return {
        "id": str(job.id),
        "externalId": job.external_id,
        "title": job.title,
        "company": job.company,
        "description": job.description,
        "requirements": job.requirements or [],
        "location": job.location,
        "locationType": _enum(job.location_type),
        "salaryMin": job.salary_min,
        "salaryMax": job.salary_max,
        "salaryCurrency": job.salary_currency,
        "sourceUrl": job.source_url,
        "sourceBoard": job.source_board,
        "postedDate": isoformat(job.posted_date),
        "createdAt": isoformat(job.created_at),
        "updatedAt": isoformat(job.updated_at),
    }


def resume_to_dict(resume: Resume) -> dict:
    return {
        "id": str(resume.id),
        "userId": str(resume.user_id),
        "fileName": resume.file_name,
        "fileUrl": resume.file_url,
        "fileType": _enum(resume.file_type),
        "fullName": resume.full_name,
        "email": resume.email,
        "phone": resume.phone,
        "location": resume.location,
        "summary": resume.summary,
        "skills": resume.skills or [],
        "experience": resume.experience or [],
        "education": resume.education or [],
        "certifications": resume.certifications or [],
        "isPrimary": resume.is_primary,
        "version": resume.version,
        "createdAt": isoformat(resume.created_at),
        "updatedAt": isoformat(resume.updated_at),
    }


def preferences_to_dict(prefs: UserPreferences) -> dict:
    return {
        "id": str(prefs.id),
        "userId": str(prefs.user_id),
        "desiredTitles": prefs.desired_titles or [],
        "desiredLocations": prefs.desired_locations or [],
        "desiredSalaryMin": prefs.desired_salary_min,
        "remotePreference": _enum(prefs.remote_preference),
        "autoApply": prefs.auto_apply,
        "dailyApplicationLimit": prefs.daily_application_limit,
        "searchQueries": prefs.search_queries or [],
        "createdAt": isoformat(prefs.created_at),
        "updatedAt": isoformat(prefs.updated_at),
    }


def application_to_dict(application: Application, include_job: bool = True) -> dict:
    data = {
        "id": str(application.id),
        "userId": str(application.user_id),
        "jobId": str(application.job_id),
        "resumeId": str(application.resume_id) if application.resume_id else None,
        "status": _enum(application.status),
        "coverLetter": application.cover_letter,
        "notes": application.notes,
        "matchScore": application.match_score,
        "appliedAt": isoformat(application.applied_at),
        "viewedAt": isoformat(application.viewed_at),
        "respondedAt": isoformat(application.responded_at),
        "createdAt": isoformat(application.created_at),
        "updatedAt": isoformat(application.updated_at),
    }
    if include_job and application.job is not None:
        data["job"] = job_to_dict(application.job)
    return data
