"""Application constants."""

USER_AGENT = "address-pins/1.0 (+local address book; contact: configured-email)"
STORAGE_KEY = "users"
RECORD_FIELDS = (
    "nome",
    "rua",
    "numero",
    "cidade",
    "estado",
    "latitude",
    "longitude",
)
REQUIRED_FORM_FIELDS = ("street", "city", "state")
DEFAULT_ZOOM_DELTA = 0.01
DEVICE_MARKER_TITLE = "Você está aqui"

MESSAGE_VALIDATION = "Preencha os campos obrigatórios: {fields}."
MESSAGE_NO_MATCH = "Não foi possível encontrar o endereço."
MESSAGE_GEOCODE_FAILED = "Erro ao cadastrar usuário. Tente novamente."
MESSAGE_STORE_FAILED = "Não foi possível salvar o usuário. Tente novamente."

EXIT_SUCCESS = 0
EXIT_USER_ERROR = 10
EXIT_HARD_FAIL = 20
JSON_LOG_FIELDS = (
    "timestamp",
    "session_id",
    "component",
    "event",
    "status",
    "record_count",
    "error_code",
    "message",
)
