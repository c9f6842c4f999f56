"""
Tenants app — школы платформы.

Каждая школа (School) = отдельный tenant: свой состав учеников и учителей,
свои результаты, платежи и объявления.

Модель данных:
    School ← N CustomUser (admin / teacher / student, FK school)
    School ← FK из Student, Teacher, Result, Payment, Notice
    School.subscription → лимиты мест + дата окончания подписки
"""
