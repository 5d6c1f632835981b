class Defaults:
    CONFIDENCE_THRESHOLD = 0.8
    USE_EXISTING_MAPPINGS = True
    USE_FUZZY_MATCHING = True
    USE_SYNONYMS = True
    SIMILARITY_METRIC = "dice"
    PROGRESS_EVERY = 10
    MAX_WORKERS = 1
    USE_PROCESSES = False
    PROGRESS_POLL_INTERVAL = 0.05
    STORE_PATH = "survey_mappings.json"
    CONFIG_FILE = "survey_mapper.toml"


class Confidence:
    EXACT = 1.0
    SYNONYM = 0.9
    LEARNED = 1.0
    NONE = 0.0


class WorkerActions:
    AUTO_MAP = "autoMap"
    GENERATE_SUGGESTIONS = "generateSuggestions"
    CALCULATE_CONFIDENCE = "calculateConfidence"
