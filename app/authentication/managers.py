"""
Custom user manager for mobile-based authentication.

This module provides the UserManager class that handles user creation
with the mobile number as the primary identifier instead of username.

Related files:
    - models.py: User model that uses this manager

Security:
    - Passwords are always hashed via set_password()
"""

from django.contrib.auth.models import BaseUserManager


class UserManager(BaseUserManager):
    """
    Custom manager for User model with mobile-based authentication.

    Usage:
        # Create a regular user
        user = User.objects.create_user(
            mobile="5550001111",
            password="secret1",
            name="Ada",
        )

        # Create a superuser
        admin = User.objects.create_superuser(
            mobile="5550009999",
            password="adminpassword",
            name="Admin",
        )
    """

    def create_user(self, mobile, password=None, **extra_fields):
        """
        Create and save a regular user with the given mobile and password.

        Args:
            mobile: User's 10-digit mobile number (required)
            password: User's password (hashed before storage)
            **extra_fields: Additional fields to set on the user

        Returns:
            User: The created user instance

        Raises:
            ValueError: If mobile is not provided
        """
        if not mobile:
            raise ValueError("The Mobile field must be set")

        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)

        user = self.model(mobile=mobile.strip(), **extra_fields)

        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()

        user.save(using=self._db)
        return user

    def create_superuser(self, mobile, password=None, **extra_fields):
        """
        Create and save a superuser with the given mobile and password.

        Raises:
            ValueError: If is_staff or is_superuser is not True
        """
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")

        return self.create_user(mobile, password, **extra_fields)
