from telegram import ReplyKeyboardMarkup

from ..models import GroupMember, User


def main_menu():
    keyboard = [
        ["/limits", "/request"],
        ["/requests", "/group"],
        ["/notifications", "/help"],
    ]
    return ReplyKeyboardMarkup(keyboard, resize_keyboard=True)


def member_list_keyboard(members: list[GroupMember]):
    keyboard = [["Back"]]
    for index, member in enumerate(members):
        keyboard.append([f"{index + 1} - {member.username}"])
    return ReplyKeyboardMarkup(keyboard, one_time_keyboard=True, resize_keyboard=True)


def search_results_keyboard(users: list[User]):
    keyboard = [["Back"]]
    for index, user in enumerate(users):
        keyboard.append([f"{index + 1} - {user.display_name} ({user.email})"])
    return ReplyKeyboardMarkup(keyboard, one_time_keyboard=True, resize_keyboard=True)
