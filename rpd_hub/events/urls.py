EVENTS_URL = "/api/events"
EVENT_RSVPS_URL = "/api/events/{event_id}/rsvps"
EVENT_RSVP_URL = "/api/events/{event_id}/rsvp"
