from flask_wtf import FlaskForm
from wtforms import PasswordField, StringField, TextAreaField
from wtforms.validators import DataRequired, Email, Length, Optional


class PasswordRequestForm(FlaskForm):
    """Access request body; accepts JSON or form posts."""

    FIELD_NAMES = ("name", "email", "company", "reason", "otherReason", "timestamp")
    REQUIRED = ("name", "email", "reason")

    class Meta:
        csrf = False

    name = StringField("Full Name", validators=[DataRequired(), Length(max=120)])
    email = StringField("Email", validators=[DataRequired(), Email(), Length(max=255)])
    company = StringField("Company", validators=[Optional(), Length(max=160)])
    reason = StringField("Reason for Access", validators=[DataRequired(), Length(max=160)])
    otherReason = TextAreaField("Other Reason", validators=[Optional(), Length(max=2000)])
    timestamp = StringField("Timestamp", validators=[Optional(), Length(max=64)])

    def error_message(self):
        if any(not (self[name].data or "").strip() for name in self.REQUIRED):
            return "Missing required fields"
        if "email" in self.errors:
            return "Invalid email address"
        return "Invalid field values"

    def workflow_fields(self):
        return {
            "name": self.name.data,
            "email": self.email.data,
            "company": self.company.data,
            "reason": self.reason.data,
            "otherReason": self.otherReason.data,
            "timestamp": self.timestamp.data,
        }


class VerifyPasswordForm(FlaskForm):
    FIELD_NAMES = ("password",)

    class Meta:
        csrf = False

    password = PasswordField("Password", validators=[DataRequired(), Length(max=128)])
