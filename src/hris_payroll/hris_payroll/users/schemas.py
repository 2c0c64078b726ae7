from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class RegisterRequest(BaseModel):
    username: Optional[str] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = None
    confirm_password: Optional[str] = Field(None, alias="confirmPassword")
    nama_lengkap: Optional[str] = None
    jenis_kelamin: Optional[str] = None
    alamat: Optional[str] = None
    no_hp: Optional[str] = None
    jabatan: Optional[str] = None
    status_karyawan: Optional[str] = None


class LoginRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class ProfileUpdate(BaseModel):
    email: Optional[EmailStr] = None
    nama_lengkap: Optional[str] = None
    no_hp: Optional[str] = None
    alamat: Optional[str] = None


class ChangePasswordRequest(BaseModel):
    old_password: Optional[str] = Field(None, alias="oldPassword")
    new_password: Optional[str] = Field(None, alias="newPassword")


class ForgotPasswordRequest(BaseModel):
    email: Optional[str] = None


class ResetPasswordRequest(BaseModel):
    token: Optional[str] = None
    new_password: Optional[str] = Field(None, alias="newPassword")


class CompleteProfileRequest(BaseModel):
    jabatan: Optional[str] = None
    alamat: Optional[str] = None
    no_hp: Optional[str] = None
    status_karyawan: Optional[str] = None
    jenis_kelamin: Optional[str] = None
    password: Optional[str] = None
