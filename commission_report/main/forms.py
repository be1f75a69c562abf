# ==============================================================================
# commission_report/main/forms.py
# ------------------------------------------------------------------------------
# Defines web forms using Flask-WTF for user input and validation.
# ==============================================================================

from flask_wtf import FlaskForm
from flask_wtf.file import FileField, FileRequired, FileAllowed
from wtforms import BooleanField, HiddenField, SubmitField
from wtforms.validators import DataRequired

class UploadForm(FlaskForm):
    """Form for uploading the commission worksheet."""
    file = FileField('Archivo Excel', validators=[
        FileRequired(message="Por favor, selecciona un archivo."),
        FileAllowed(['xlsx', 'xls'], message="Por favor, selecciona un archivo Excel válido (.xlsx, .xls)")
    ])
    submit = SubmitField('Leer Excel')

class DeleteRowForm(FlaskForm):
    """Deleting a row is irreversible, so the user must tick the confirmation box."""
    row_id = HiddenField(validators=[DataRequired()])
    confirm = BooleanField('¿Estás seguro de que quieres eliminar esta fila?',
                           validators=[DataRequired(message="Confirma la eliminación de la fila.")])
    submit = SubmitField('Eliminar')

class ClearForm(FlaskForm):
    submit = SubmitField('Limpiar datos')
