SHEETS_SCOPES = ["https://www.googleapis.com/auth/spreadsheets.readonly"]

# the sheet header is usually typed with the accent
CATEGORY_ALT_HEADER = "categoría"

COUNTER_KEY = "numeroRemito"
COUNTER_START = 1
NUMBER_WIDTH = 4
PREVIEW_NO_NUMBER = "----"

WHATSAPP_URL = "https://wa.me/"

DEFAULT_CUSTOMER = "Cliente"
SHARE_DEFAULT_CUSTOMER = "No especificado"
EMPTY_FIELD = "-"

MSG_CATALOG_ERROR = "Error al leer Google Sheets"
MSG_NO_PRODUCT = "Seleccioná un producto."
MSG_EMPTY_CART = "Agregá al menos un producto."
MSG_EMPTY_CART_SHARE = "Agregá al menos un producto antes de enviar por WhatsApp."
MSG_NOT_GENERATED = "Primero generá el remito (PDF)."
MSG_BUSY = "Ya se está generando un remito."
MSG_GENERATED = "Remito (PDF) generado correctamente."
MSG_COUNTER_ERROR = "No se pudo asignar el número de remito."
