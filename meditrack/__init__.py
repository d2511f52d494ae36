"""Rule-based symptom triage for the MediTrack practice management system."""
