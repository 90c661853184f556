from dataclasses import dataclass


@dataclass
class EmailTemplates:
    EVENT_CREATED_SUBJECT = "Event Created: {title}"
    EVENT_CREATED_TEXT = """Hi! Your RPD event "{title}" has been successfully posted on RPD Hub.

You will receive an email notification whenever someone RSVPs for your event.

Details:
Date: {date}
Time: {time}
Location: {location}

Thank you for organizing!"""

    RSVP_CONFIRMATION_SUBJECT = "RSVP Confirmation: {title}"
    RSVP_CONFIRMATION_TEXT = """Hi! You've successfully RSVP'd for {title}.

Details:
Date: {date}
Time: {time}
Location: {location}
Format: {format_label}
Video Policy: {video_label}

Description:
{description}

Playlist:
{playlist}

See you there!"""

    NEW_RSVP_SUBJECT = "New RSVP for your event: {title}"
    NEW_RSVP_TEXT = """Hi! Someone just RSVP'd for your event "{title}".

Attendee Email: {attendee_email}
Total RSVPs: {rsvp_count}

Keep up the great work!"""

    TEST_SUBJECT = "RPD Hub SMTP Test"
    TEST_TEXT = "If you are reading this, your SMTP settings are working correctly!"

    @staticmethod
    def format_label(event_format: str | None) -> str:
        if event_format == "memory":
            return "Dancing from memory"
        return "Video/Choreo provided"

    @staticmethod
    def video_label(video_recorded: bool) -> str:
        if video_recorded:
            return "Will be recorded & posted"
        return "No public recording"
