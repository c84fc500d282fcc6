# skillsync/services/email_templates.py

from html import escape

from skillsync.core import config

BUTTON_STYLE = (
    "background: #000; color: #fff; padding: 12px 24px; text-decoration: none; "
    "border-radius: 6px; display: inline-block;"
)
CARD_STYLE = "background: #f5f5f5; padding: 20px; border-radius: 8px; margin: 20px 0;"
SIGNATURE = "<p>Best regards,<br>The SkillSync Team</p>"


def _e(value) -> str:
    return escape(str(value)) if value is not None else ""


def _meeting_block(meeting_link: str | None) -> str:
    if not meeting_link:
        return ""
    link = _e(meeting_link)
    return (
        f'<p style="margin: 30px 0;"><a href="{link}" style="{BUTTON_STYLE}">'
        "&#127909; Join Video Meeting</a></p>"
        f'<p style="color: #666; font-size: 14px;">Meeting Link: <a href="{link}">{link}</a></p>'
    )


def _details_block(
    skill: str,
    role: str,
    partner_label: str,
    partner_name: str,
    session_time: str,
    duration_minutes: int,
) -> str:
    return (
        f'<div style="{CARD_STYLE}">'
        "<h2>Session Details</h2>"
        f"<p><strong>Skill:</strong> {_e(skill)}</p>"
        f"<p><strong>Role:</strong> {_e(role)}</p>"
        f"<p><strong>{partner_label}:</strong> {_e(partner_name)}</p>"
        f"<p><strong>Time:</strong> {_e(session_time)}</p>"
        f"<p><strong>Duration:</strong> {duration_minutes} minutes</p>"
        "</div>"
    )


def _notes_block(notes: str | None) -> str:
    return f"<p><strong>Notes:</strong> {_e(notes)}</p>" if notes else ""


def session_confirmed_email(
    recipient_name: str | None,
    is_teacher: bool,
    partner_name: str | None,
    skill: str,
    session_time: str,
    duration_minutes: int,
    meeting_link: str | None,
    notes: str | None,
) -> tuple[str, str]:
    verb = "Teaching" if is_teacher else "Learning"
    subject = f"Session Confirmed: {verb} {skill}"
    html = (
        "<h1>Session Confirmed! &#127881;</h1>"
        f"<p>Hi {_e(recipient_name or 'there')},</p>"
        "<p>Great news! Your session has been confirmed.</p>"
        + _details_block(
            skill,
            "Teacher" if is_teacher else "Learner",
            "Student" if is_teacher else "Teacher",
            partner_name or "Unknown",
            session_time,
            duration_minutes,
        )
        + _meeting_block(meeting_link)
        + _notes_block(notes)
        + "<p>You'll receive a reminder 1 hour before the session starts.</p>"
        + SIGNATURE
    )
    return subject, html


def session_declined_email(
    learner_name: str | None,
    teacher_name: str | None,
    skill: str,
    session_time: str,
) -> tuple[str, str]:
    subject = f"Session Declined: {skill}"
    html = (
        "<h1>Session Update</h1>"
        f"<p>Hi {_e(learner_name or 'there')},</p>"
        f"<p>Unfortunately, {_e(teacher_name or 'the teacher')} has declined your session request.</p>"
        f'<div style="{CARD_STYLE}">'
        "<h2>Session Details</h2>"
        f"<p><strong>Skill:</strong> {_e(skill)}</p>"
        f"<p><strong>Teacher:</strong> {_e(teacher_name or 'Unknown')}</p>"
        f"<p><strong>Requested Time:</strong> {_e(session_time)}</p>"
        "</div>"
        "<p>Don't worry! You can find other teachers for this skill on the platform "
        "and book another session.</p>"
        f'<p style="margin: 30px 0;"><a href="{_e(config.APP_URL)}/match" style="{BUTTON_STYLE}">'
        "Find Another Teacher</a></p>"
        + SIGNATURE
    )
    return subject, html


def session_reminder_email(
    recipient_name: str | None,
    is_teacher: bool,
    partner_name: str | None,
    skill: str,
    session_time: str,
    duration_minutes: int,
    meeting_link: str,
    notes: str | None,
) -> tuple[str, str]:
    verb = "Teaching" if is_teacher else "Learning"
    subject = f"Session Reminder: {verb} {skill} in 1 hour"
    closing = "Good luck with your session!" if is_teacher else "Enjoy your learning session!"
    html = (
        "<h1>Session Starting Soon!</h1>"
        f"<p>Hi {_e(recipient_name or 'there')},</p>"
        "<p>This is a reminder that your session is starting in approximately 1 hour.</p>"
        + _details_block(
            skill,
            "Teacher" if is_teacher else "Learner",
            "Student" if is_teacher else "Teacher",
            partner_name or "Unknown",
            session_time,
            duration_minutes,
        )
        + _meeting_block(meeting_link)
        + _notes_block(notes)
        + f"<p>{closing}</p>"
        + SIGNATURE
    )
    return subject, html


def stars(rating: int) -> str:
    return "★" * rating + "☆" * (5 - rating)


def weekly_digest_email(recipient_name: str | None, digest: dict) -> tuple[str, str]:
    """
    digest keys: sessions_taught, sessions_learned, hours_taught, hours_learned,
    skills_taught, skills_learned, average_rating, reviews, upcoming
    """
    total = digest["sessions_taught"] + digest["sessions_learned"]
    subject = f"Your Weekly Learning Digest - {total} sessions this week!"

    skills_html = ""
    if digest["skills_taught"]:
        skills_html += (
            '<div style="margin-top: 16px;"><strong>Skills Taught:</strong> '
            f"<span>{_e(', '.join(digest['skills_taught']))}</span></div>"
        )
    if digest["skills_learned"]:
        skills_html += (
            '<div style="margin-top: 8px;"><strong>Skills Learned:</strong> '
            f"<span>{_e(', '.join(digest['skills_learned']))}</span></div>"
        )

    rating_html = ""
    if digest["average_rating"] is not None:
        rating_html = (
            '<div style="margin-top: 16px; padding-top: 16px; border-top: 1px solid #eee;">'
            "<strong>Average Rating This Week:</strong> "
            f'<span style="color: #f59e0b; font-size: 18px;">★ {digest["average_rating"]:.1f}</span>'
            "</div>"
        )

    reviews_html = ""
    if digest["reviews"]:
        items = "".join(
            '<div style="background: #f9f9f9; padding: 12px; border-radius: 6px; margin-bottom: 8px;">'
            f'<div style="color: #f59e0b;">{stars(r["rating"])}</div>'
            + (
                f'<p style="margin: 8px 0 0 0; color: #555; font-style: italic;">"{_e(r["comment"])}"</p>'
                if r.get("comment") else ""
            )
            + "</div>"
            for r in digest["reviews"][:3]
        )
        reviews_html = f'<div style="margin-top: 20px;"><h3>New Reviews</h3>{items}</div>'

    upcoming_html = ""
    if digest["upcoming"]:
        items = "".join(
            '<li style="margin-bottom: 8px;">'
            f"<strong>{_e(u['skill'])}</strong> - {u['role_label']} with {_e(u['partner_name'])}"
            f'<br><span style="color: #666; font-size: 13px;">{_e(u["when"])}</span></li>'
            for u in digest["upcoming"]
        )
        upcoming_html = (
            '<div style="margin-top: 20px;"><h3>Upcoming Sessions</h3>'
            f'<ul style="list-style: none; padding: 0; margin: 0;">{items}</ul></div>'
        )

    app_url = _e(config.APP_URL)
    html = (
        '<div style="font-family: sans-serif; max-width: 600px; margin: 0 auto;">'
        "<h1>Your Weekly SkillSync Digest</h1>"
        f"<p>Hi {_e(recipient_name or 'there')},</p>"
        "<p>Here's your learning and teaching activity from the past week:</p>"
        f'<div style="{CARD_STYLE}">'
        "<h2>This Week's Stats</h2>"
        f"<p><strong>{digest['sessions_taught']}</strong> Sessions Taught "
        f"({digest['hours_taught']:.1f} hours)</p>"
        f"<p><strong>{digest['sessions_learned']}</strong> Sessions Learned "
        f"({digest['hours_learned']:.1f} hours)</p>"
        + skills_html
        + rating_html
        + "</div>"
        + reviews_html
        + upcoming_html
        + '<div style="margin-top: 30px; padding-top: 20px; border-top: 1px solid #eee;">'
        "<p>Keep up the great work! Every skill you share helps build our learning community.</p>"
        f'<p><a href="{app_url}/dashboard" style="{BUTTON_STYLE}">View Full Dashboard</a></p>'
        "</div>"
        '<p style="color: #999; font-size: 12px; margin-top: 30px;">'
        "You're receiving this because you have an active SkillSync account with email digests enabled."
        f'<br><a href="{app_url}/profile" style="color: #666;">Manage email preferences</a></p>'
        "</div>"
    )
    return subject, html
