from config import BOT_NAME
from logic.glyphs import numbered_lines

# Every string the bot says lives here so wording tweaks stay in one place.

MENU_ERROR_TEXT = "⚠️ Error al cargar el menú."
QUESTIONS_ERROR_TEXT = "⚠️ Error al cargar las preguntas. Intenta nuevamente en unos minutos."
INVALID_NUMBER_TEXT = "❌ Número inválido. Escribe *menú* para ver las opciones."
QUESTION_NOT_FOUND_TEXT = "Pregunta no encontrada. Escribe *Menú* para volver."
NO_QUESTIONS_TEXT = "❌ No hay preguntas disponibles en esta categoría."
FALLBACK_TEXT = "No entendí tu mensaje. Escribe *Menú* para ver las opciones."
NAV_HINT_TEXT = (
    "🔙 Escribe *Menú* para volver al inicio.\n\n"
    "En caso de no estar conforme puedes acercarte al centro académico."
)


def no_categories_text():
    return f"¡Hola! 👋 Bienvenido a {BOT_NAME}.\n\nPor ahora no hay categorías disponibles. Intenta más tarde."


def main_menu_text(categories):
    header = (
        f"¡Hola! 👋 Bienvenido a {BOT_NAME}.\n"
        "Estamos aquí para ayudarte 24/7.\n\n"
        "📋 *Opciones disponibles:*\n\n"
    )
    body = "".join(f"{line}\n" for line in numbered_lines(c.name for c in categories))
    return header + body + "\n💡 *Escribe el número de la opción que te interesa*"


def category_questions_text(category, questions):
    header = f"📚 *{category.name}*\n\nSelecciona una pregunta:\n\n"
    body = "".join(f"{line}\n" for line in numbered_lines(q.question for q in questions))
    return header + body + "\n💡 Escribe el número de la pregunta\n🔙 Escribe *Menú* para volver al inicio."


def answer_text(question):
    return f"*{question.question}*\n\n✅ {question.answer}"
