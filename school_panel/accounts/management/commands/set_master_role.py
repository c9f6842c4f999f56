from django.core.management.base import BaseCommand, CommandError

from accounts.models import CustomUser


class Command(BaseCommand):
    help = (
        "Назначает пользователю роль владельца платформы (master). "
        "С --password создаёт пользователя, если его ещё нет."
    )

    def add_arguments(self, parser):
        parser.add_argument('email', help='Email пользователя')
        parser.add_argument(
            '--password',
            default=None,
            help='Пароль для нового пользователя (если пользователь не найден)',
        )

    def handle(self, *args, **options):
        email = options['email'].strip().lower()
        password = options['password']

        user = CustomUser.objects.filter(email__iexact=email).first()
        if user is None:
            if not password:
                raise CommandError(f'Пользователь с email {email} не найден')
            user = CustomUser.objects.create_user(email=email, password=password)
            self.stdout.write(f'Создан пользователь {email}')

        previous_role = user.role
        user.role = CustomUser.ROLE_MASTER
        # Владелец платформы не принадлежит школе
        user.school = None
        user.is_staff = True
        user.is_active = True
        user.save(update_fields=['role', 'school', 'is_staff', 'is_active', 'updated_at'])

        self.stdout.write(self.style.SUCCESS('[OK] Роль master назначена'))
        self.stdout.write(f'Email: {user.email}')
        self.stdout.write(f'Роль: {previous_role} -> {user.role}')
        self.stdout.write('Новая роль попадёт в токен после повторного входа')
