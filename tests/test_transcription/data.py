# (name, filename, expected fragment of the error message)
INVALID_FILE_CASES = [
    ("unsupported extension", "notes.txt", "Unsupported file format"),
    ("no extension", "recording", "Unsupported file format"),
]

VALID_FILENAMES = ["standup.wav", "standup.MP3", "standup.m4a"]

SEGMENTS = [
    {"id": 0, "start": 0.0, "end": 1.5, "text": "Morning all."},
    {"id": 1, "start": 1.5, "end": 4.0, "text": "Dana ships the fix today."},
]
