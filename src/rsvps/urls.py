RSVPS_URL = "/api/v1/rsvps"
RSVP_SUMMARY_URL = "/api/v1/rsvps/summary"
RSVP_EXPORT_URL = "/api/v1/rsvps/export"
RSVP_URL = "/api/v1/rsvps/{rsvp_id}"
