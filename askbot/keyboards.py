from aiogram.utils.keyboard import InlineKeyboardBuilder


def confirm_menu() -> InlineKeyboardBuilder:
    kb = InlineKeyboardBuilder()
    kb.button(text="✅ Save", callback_data="profile:save")
    kb.button(text="✏️ Start over", callback_data="profile:restart")
    kb.adjust(2)
    return kb
